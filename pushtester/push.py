"""
Single-attempt Web Push dispatch and classification of the push service's answer.

Message encryption and VAPID JWT signing are done by pywebpush. Signing
credentials are passed to it on every call, so concurrent sends with different
identities never share signing state.
"""

import json
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from pywebpush import webpush

from .crypto import public_key_for
from .models import NotificationPayload, PushOutcome, PushSubscriptionTarget, VapidIdentity
from . import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SigningIdentity:
    """VAPID credentials for exactly one send."""
    public_key: str
    private_key: str
    subject: str

    @classmethod
    def from_vapid(cls, identity: VapidIdentity) -> 'SigningIdentity':
        return cls(
            public_key=identity.public_key.strip(),
            private_key=identity.private_key.strip(),
            subject=identity.normalized_subject(),
        )

    def claims(self) -> Dict[str, Any]:
        # pywebpush fills in aud/exp on the dict it is given, so build a new one per call
        return {'sub': self.subject}


def classify_status(status_code: Optional[int]) -> Optional[PushOutcome]:
    """Outcome for a status code in the fixed table, or None if it is not listed."""
    if status_code is None or status_code not in config.STATUS_MESSAGES:
        return None
    message, details = config.STATUS_MESSAGES[status_code]
    return PushOutcome(
        success=False,
        status_code=status_code,
        message=message,
        details=details,
    )


def describe_success(status_code: Optional[int]) -> PushOutcome:
    return PushOutcome(
        success=True,
        status_code=status_code,
        message=config.PUSH_SUCCESS_MESSAGE,
        details=config.PUSH_SUCCESS_DETAILS.format(status_code=status_code),
    )


def extract_error_details(body: Optional[str], error_text: Optional[str]) -> str:
    """
    Human-readable reason for a failure the table does not cover.

    Prefers the `message` or `error` field of a JSON body, then the raw body,
    then the transport error text.
    """
    if not body:
        return error_text or config.UNKNOWN_ERROR_DETAILS
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    if isinstance(parsed, dict):
        reason = parsed.get('message') or parsed.get('error')
        if reason:
            return reason if isinstance(reason, str) else json.dumps(reason)
    return body


def classify_failure(status_code: Optional[int], body: Optional[str] = None,
                     error_text: Optional[str] = None) -> PushOutcome:
    """Map a rejected or failed send to an outcome. Pure, no I/O."""
    known = classify_status(status_code)
    if known is not None:
        return known
    return PushOutcome(
        success=False,
        status_code=status_code,
        message=config.PUSH_FAILURE_MESSAGE,
        details=extract_error_details(body, error_text),
    )


def _error_fields(error: Exception) -> Tuple[Optional[int], Optional[str], Optional[str]]:
    """(status_code, body, error_text) from a pywebpush or requests exception."""
    response = getattr(error, 'response', None)
    status_code = None
    body = None
    # requests.Response is falsy for 4xx/5xx, compare against None
    if response is not None:
        status_code = getattr(response, 'status_code', None)
        body = getattr(response, 'text', None)
    error_text = getattr(error, 'message', None) or str(error) or type(error).__name__
    return status_code, body, error_text


class PushDispatcher:
    """
    Sends one push notification per call and classifies the result.

    The dispatcher holds no per-send state. No retries are made; retry policy
    belongs to the caller.
    """

    def __init__(self, sender: Optional[Callable[..., Any]] = None,
                 timeout: float = config.PUSH_TIMEOUT_SECONDS,
                 ttl: int = config.PUSH_TTL_SECONDS):
        self.sender = sender or webpush
        self.timeout = timeout
        self.ttl = ttl

    async def send(self, target: PushSubscriptionTarget, identity: VapidIdentity,
                   payload: NotificationPayload, timeout: Optional[float] = None) -> PushOutcome:
        """
        Perform one signed push-send attempt.

        Args:
            target: Subscription to deliver to
            identity: VAPID credentials; the subject is normalized for this call only
            payload: Notification content, sent as a JSON body
            timeout: Upper bound in seconds; defaults to the dispatcher's timeout

        Returns:
            PushOutcome. Never raises for send failures.
        """
        if not identity.has_keys():
            return PushOutcome(
                success=False,
                message=config.MISSING_KEYS_MESSAGE,
                details=config.MISSING_KEYS_DETAILS,
            )
        if not target.is_complete():
            return PushOutcome(
                success=False,
                message=config.MISSING_TARGET_MESSAGE,
                details=config.MISSING_TARGET_DETAILS,
            )

        signing = SigningIdentity.from_vapid(identity)
        derived = public_key_for(signing.private_key)
        if derived is not None and derived != signing.public_key:
            logger.warning("VAPID public key does not match the private key; expect a 401 from the push service")

        subscription_info = target.to_subscription_info()
        data = json.dumps(payload.to_dict())
        if len(data.encode('utf-8')) > config.PAYLOAD_SIZE_LIMIT:
            logger.warning(f"Payload is {len(data)} bytes, most push services reject more than {config.PAYLOAD_SIZE_LIMIT}")

        limit = timeout if timeout is not None else self.timeout
        logger.info(f"Sending push to {target.endpoint} as {signing.subject}")
        # One worker per send, released without joining: a timed-out request
        # must not hold the caller (or asyncio.run's shutdown) past `limit`
        executor = ThreadPoolExecutor(max_workers=1)
        loop = asyncio.get_running_loop()
        try:
            response = await asyncio.wait_for(
                loop.run_in_executor(executor, self._deliver, subscription_info, data, signing, limit),
                timeout=limit,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Push to {target.endpoint} timed out after {limit}s")
            return classify_failure(None, error_text=config.TIMEOUT_ERROR_DETAILS.format(timeout=limit))
        except Exception as e:
            status_code, body, error_text = _error_fields(e)
            logger.warning(f"Push to {target.endpoint} failed (status {status_code}): {error_text}")
            return classify_failure(status_code, body, error_text)
        finally:
            executor.shutdown(wait=False)

        status_code = getattr(response, 'status_code', None)
        logger.info(f"Push service answered {status_code}")
        return describe_success(status_code)

    def _deliver(self, subscription_info: Dict[str, Any], data: str,
                 signing: SigningIdentity, timeout: float) -> Any:
        return self.sender(
            subscription_info=subscription_info,
            data=data,
            vapid_private_key=signing.private_key,
            vapid_claims=signing.claims(),
            ttl=self.ttl,
            timeout=timeout,
        )
