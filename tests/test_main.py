import io
import json
import time

import pytest

from pushtester import api
from pushtester.main import PushTesterApp
from pushtester.models import PersistedConfig
from pushtester.push import PushDispatcher

from .conftest import FakeResponse, RecordingSender


@pytest.fixture()
def sender(monkeypatch, config_store):
    sender = RecordingSender(response=FakeResponse(201))
    monkeypatch.setattr(api, "_config_store", config_store)
    monkeypatch.setattr(api, "_dispatcher", PushDispatcher(sender=sender))
    return sender


def _run(*argv):
    out = io.StringIO()
    code = PushTesterApp(out=out).run(list(argv))
    return code, out.getvalue()


def test_send_with_flags(sender, target):
    code, output = _run(
        "send", "--public-key", "BPub", "--private-key", "priv", "--subject", "a@b.com",
        "--endpoint", target.endpoint, "--p256dh", target.p256dh, "--auth", target.auth,
        "--title", "Hello",
    )

    assert code == 0
    assert output.startswith("OK [201]: Push notification sent successfully!")
    assert sender.calls[0]["vapid_claims"] == {"sub": "mailto:a@b.com"}


def test_send_uses_saved_config_and_subscription_file(sender, config_store, identity, tmp_path):
    config_store.save(PersistedConfig(vapid=identity))
    subscription = tmp_path / "subscription.json"
    subscription.write_text(json.dumps({
        "endpoint": "https://push.example/xyz", "keys": {"p256dh": "BKey", "auth": "secret"},
    }))

    code, _ = _run("send", "--subscription-json", str(subscription), "--save")

    assert code == 0
    assert sender.calls[0]["vapid_private_key"] == identity.private_key
    assert sender.calls[0]["subscription_info"]["endpoint"] == "https://push.example/xyz"
    assert config_store.load().last_subscription.endpoint == "https://push.example/xyz"


def test_send_reports_validation_error_without_sending(sender):
    code, output = _run("send", "--json")

    assert code == 1
    assert json.loads(output) == {
        "success": False,
        "message": "Validation Error",
        "details": "Endpoint is required",
    }
    assert sender.calls == []


def test_send_returns_at_timeout_while_request_is_still_running(monkeypatch, config_store, identity, target):
    def slow_sender(**kwargs):
        time.sleep(2)
        return FakeResponse(201)

    monkeypatch.setattr(api, "_config_store", config_store)
    monkeypatch.setattr(api, "_dispatcher", PushDispatcher(sender=slow_sender))
    config_store.save(PersistedConfig(vapid=identity, last_subscription=target))

    started = time.monotonic()
    code, output = _run("send", "--timeout", "0.1")
    elapsed = time.monotonic() - started

    assert code == 1
    assert "did not respond within 0.1 seconds" in output
    assert elapsed < 1.5


def test_send_reports_service_rejection(sender, config_store, identity, target):
    from pywebpush import WebPushException
    sender.error = WebPushException("gone", response=FakeResponse(410))
    config_store.save(PersistedConfig(vapid=identity, last_subscription=target))

    code, output = _run("send")

    assert code == 1
    assert "FAILED [410]: Subscription expired" in output


def test_save_and_show_masks_private_key(sender, target):
    code, _ = _run(
        "save", "--public-key", "BPub", "--private-key", "very-secret-private-key", "--subject", "a@b.com",
        "--endpoint", target.endpoint, "--p256dh", target.p256dh, "--auth", target.auth,
    )
    assert code == 0

    code, output = _run("show")
    assert code == 0
    assert "very-secret-private-key" not in output
    assert "•" * 8 + "-key" in output
    assert target.endpoint in output


def test_generate_keys_and_save(sender, config_store):
    code, output = _run("generate-keys", "--subject", "a@b.com", "--save")

    assert code == 0
    saved = config_store.load().vapid
    assert saved.public_key in output
    assert saved.subject == "a@b.com"


def test_clear(sender, config_store, identity):
    config_store.save(PersistedConfig(vapid=identity))

    code, _ = _run("clear")

    assert code == 0
    assert config_store.load() == PersistedConfig()
