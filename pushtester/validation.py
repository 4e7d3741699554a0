"""
Input checks performed by the shell before it asks the core to send.
"""

import json
from typing import Any, Dict

from .errors import ValidationError
from .models import NotificationPayload, PushSubscriptionTarget, VapidIdentity


def parse_subscription_json(text: str) -> PushSubscriptionTarget:
    """
    Parse a pasted PushSubscription (the output of subscription.toJSON()).

    Raises:
        ValidationError: If the text is not JSON or lacks endpoint/keys
    """
    try:
        data: Dict[str, Any] = json.loads(text)
    except ValueError:
        raise ValidationError("Invalid JSON format")
    if not isinstance(data, dict) or not data.get('endpoint') or not isinstance(data.get('keys'), dict):
        raise ValidationError("Invalid JSON format")
    return PushSubscriptionTarget.from_dict(data)


def validate_send_request(target: PushSubscriptionTarget, identity: VapidIdentity,
                          payload: NotificationPayload) -> None:
    """Raise ValidationError naming the first missing field."""
    if not target.endpoint:
        raise ValidationError("Endpoint is required")
    if not target.p256dh or not target.auth:
        raise ValidationError("p256dh and auth keys are required")
    if not identity.public_key or not identity.private_key:
        raise ValidationError("VAPID public and private keys are required")
    if not identity.subject:
        raise ValidationError("Subject (email) is required")
    if not payload.title:
        raise ValidationError("Notification title is required")
