"""
Data model shared by the store, the dispatcher and the shell.

Serialized shapes follow the browser's PushSubscription.toJSON() and the
camelCase keys of the persisted record.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import config


@dataclass
class VapidIdentity:
    """VAPID keypair and contact subject used to sign push requests."""
    public_key: str
    private_key: str
    subject: str = ""

    def has_keys(self) -> bool:
        return bool(self.public_key) and bool(self.private_key)

    def normalized_subject(self) -> str:
        """Subject as a URI; a bare address gets a mailto: prefix. Not stored."""
        subject = self.subject.strip()
        if subject.startswith(config.VAPID_SUBJECT_SCHEMES):
            return subject
        return f"{config.DEFAULT_SUBJECT_SCHEME}{subject}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'publicKey': self.public_key,
            'privateKey': self.private_key,
            'subject': self.subject,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VapidIdentity':
        return cls(
            public_key=data.get('publicKey') or "",
            private_key=data.get('privateKey') or "",
            subject=data.get('subject') or "",
        )


@dataclass
class PushSubscriptionTarget:
    """A browser push registration: endpoint plus the two subscription keys."""
    endpoint: str
    p256dh: str
    auth: str
    expiration_time: Optional[int] = None

    def is_complete(self) -> bool:
        return bool(self.endpoint) and bool(self.p256dh) and bool(self.auth)

    def to_subscription_info(self) -> Dict[str, Any]:
        """Wire shape for the sender. expirationTime is not forwarded."""
        return {
            'endpoint': self.endpoint,
            'keys': {
                'p256dh': self.p256dh,
                'auth': self.auth,
            },
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_subscription_info()
        data['expirationTime'] = self.expiration_time
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PushSubscriptionTarget':
        keys = data.get('keys') or {}
        return cls(
            endpoint=data.get('endpoint') or "",
            p256dh=keys.get('p256dh') or "",
            auth=keys.get('auth') or "",
            expiration_time=data.get('expirationTime'),
        )


@dataclass
class NotificationPayload:
    """Notification content delivered to the service worker as JSON."""
    title: str
    body: str = ""
    icon: Optional[str] = None
    badge: Optional[str] = None
    tag: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'title': self.title, 'body': self.body}
        # Unset optionals are left out of the JSON body
        for name in ('icon', 'badge', 'tag', 'data'):
            value = getattr(self, name)
            if value:
                payload[name] = value
        return payload


@dataclass
class PersistedConfig:
    """Configuration record owned by SecureConfigStore."""
    vapid: Optional[VapidIdentity] = None
    last_subscription: Optional[PushSubscriptionTarget] = None

    def is_empty(self) -> bool:
        return self.vapid is None and self.last_subscription is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.vapid is not None:
            data['vapid'] = self.vapid.to_dict()
        if self.last_subscription is not None:
            data['lastSubscription'] = self.last_subscription.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PersistedConfig':
        vapid = data.get('vapid')
        subscription = data.get('lastSubscription')
        return cls(
            vapid=VapidIdentity.from_dict(vapid) if vapid else None,
            last_subscription=PushSubscriptionTarget.from_dict(subscription) if subscription else None,
        )


@dataclass
class PushOutcome:
    """Result of one send attempt. Callers only need to branch on `success`."""
    success: bool
    message: str
    status_code: Optional[int] = None
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'success': self.success, 'message': self.message}
        if self.status_code is not None:
            data['statusCode'] = self.status_code
        if self.details is not None:
            data['details'] = self.details
        return data
