import threading

import pytest

from pushtester.crypto import CryptoManager
from pushtester.models import NotificationPayload, PushSubscriptionTarget, VapidIdentity
from pushtester.storage import KeyValueStore, SecureConfigStore


class FakeResponse:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text

    def __bool__(self):
        # Mirrors requests.Response, which is falsy for error statuses
        return self.status_code < 400


class RecordingSender:
    """Stands in for pywebpush.webpush and remembers every call."""

    def __init__(self, response=None, error: Exception = None):
        self.response = response if response is not None else FakeResponse(201)
        self.error = error
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, **kwargs):
        with self._lock:
            self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture()
def store_path(tmp_path):
    return str(tmp_path / "push-tester-config.json")


@pytest.fixture()
def crypto() -> CryptoManager:
    return CryptoManager()


@pytest.fixture()
def config_store(store_path, crypto) -> SecureConfigStore:
    return SecureConfigStore(store=KeyValueStore(store_path), crypto=crypto)


@pytest.fixture()
def identity() -> VapidIdentity:
    return VapidIdentity(
        public_key="BPublicKeyFromTheVapidPair",
        private_key="private-key-from-the-vapid-pair",
        subject="dev@example.com",
    )


@pytest.fixture()
def target() -> PushSubscriptionTarget:
    return PushSubscriptionTarget(
        endpoint="https://fcm.googleapis.com/fcm/send/abc123",
        p256dh="BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM",
        auth="tBHItJI5svbpez7KI4CCXg",
        expiration_time=1735689600000,
    )


@pytest.fixture()
def payload() -> NotificationPayload:
    return NotificationPayload(title="Hello", body="From the tester")
