"""
Entry points the shell calls: load/save the persisted config and send a push.
"""

from typing import Optional

from .models import NotificationPayload, PersistedConfig, PushOutcome, PushSubscriptionTarget, VapidIdentity
from .push import PushDispatcher
from .storage import SecureConfigStore

_config_store: Optional[SecureConfigStore] = None
_dispatcher: Optional[PushDispatcher] = None


def get_config_store() -> SecureConfigStore:
    global _config_store
    if _config_store is None:
        _config_store = SecureConfigStore()
    return _config_store


def get_dispatcher() -> PushDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = PushDispatcher()
    return _dispatcher


def load_config() -> PersistedConfig:
    return get_config_store().load()


def save_config(persisted: PersistedConfig) -> bool:
    return get_config_store().save(persisted)


def clear_config() -> bool:
    return get_config_store().clear()


async def send_push(target: PushSubscriptionTarget, identity: VapidIdentity,
                    payload: NotificationPayload, timeout: Optional[float] = None) -> PushOutcome:
    return await get_dispatcher().send(target, identity, payload, timeout=timeout)
