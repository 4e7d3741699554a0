"""
Web Push Tester
Copyright (c) 2025

Holds VAPID credentials and a push subscription, sends a single signed test
notification to a push service and reports the outcome. The VAPID private key
is kept encrypted in a local key/value store.
"""

from .api import clear_config, load_config, save_config, send_push
from .models import NotificationPayload, PersistedConfig, PushOutcome, PushSubscriptionTarget, VapidIdentity

__all__ = [
    "clear_config",
    "load_config",
    "save_config",
    "send_push",
    "NotificationPayload",
    "PersistedConfig",
    "PushOutcome",
    "PushSubscriptionTarget",
    "VapidIdentity",
]
