"""
Command-line shell for the Web Push Tester.

Collects subscription, VAPID and payload fields from flags (falling back to the
saved config), optionally saves them, sends one push and prints the outcome.
"""

import sys
import json
import asyncio
import logging
import argparse
from typing import List, Optional

from . import config
from . import api
from .crypto import generate_vapid_keys
from .errors import ValidationError
from .models import NotificationPayload, PersistedConfig, PushOutcome, PushSubscriptionTarget, VapidIdentity
from .utils import mask_secret
from .validation import parse_subscription_json, validate_send_request

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        raise ValidationError(f"Cannot read {path}: {e.strerror}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pushtester", description=f"{config.APP_NAME} v{config.APP_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("show", help="Print the saved configuration (private key masked)")
    commands.add_parser("clear", help="Delete the saved configuration")

    keys = commands.add_parser("generate-keys", help="Generate a new VAPID keypair")
    keys.add_argument("--subject", default="", help="Contact for the VAPID subject, e.g. you@example.com")
    keys.add_argument("--save", action="store_true", help="Save the new keypair, keeping the saved subscription")

    for name, help_text in (("save", "Save VAPID keys and subscription"), ("send", "Send one test notification")):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("--public-key", help="VAPID public key")
        sub.add_argument("--private-key", help="VAPID private key")
        sub.add_argument("--subject", help="VAPID subject (mailto: or https: URI, or a bare email)")
        sub.add_argument("--subscription-json", metavar="FILE", help="PushSubscription JSON file, '-' for stdin")
        sub.add_argument("--endpoint", help="Subscription endpoint URL")
        sub.add_argument("--p256dh", help="Subscription p256dh key")
        sub.add_argument("--auth", help="Subscription auth secret")

    send = commands.choices["send"]
    send.add_argument("--title", default="Test Notification", help="Notification title")
    send.add_argument("--body", default="This is a test push notification.", help="Notification body")
    send.add_argument("--icon", help="Icon URL")
    send.add_argument("--badge", help="Badge URL")
    send.add_argument("--tag", help="Notification tag")
    send.add_argument("--data", help="Extra JSON object delivered as payload.data")
    send.add_argument("--timeout", type=float, default=None, help="Seconds to wait for the push service")
    send.add_argument("--save", action="store_true", help="Save VAPID keys and subscription before sending")
    send.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    return parser


class PushTesterApp:
    """Runs one command against the saved config and the push dispatcher."""

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self.saved = PersistedConfig()

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def _identity_from(self, args: argparse.Namespace) -> VapidIdentity:
        saved = self.saved.vapid or VapidIdentity("", "", "")
        return VapidIdentity(
            public_key=args.public_key if args.public_key is not None else saved.public_key,
            private_key=args.private_key if args.private_key is not None else saved.private_key,
            subject=args.subject if args.subject is not None else saved.subject,
        )

    def _target_from(self, args: argparse.Namespace) -> PushSubscriptionTarget:
        if args.subscription_json:
            target = parse_subscription_json(_read_text(args.subscription_json))
        else:
            target = self.saved.last_subscription or PushSubscriptionTarget("", "", "")
        return PushSubscriptionTarget(
            endpoint=args.endpoint if args.endpoint is not None else target.endpoint,
            p256dh=args.p256dh if args.p256dh is not None else target.p256dh,
            auth=args.auth if args.auth is not None else target.auth,
            expiration_time=target.expiration_time,
        )

    def _payload_from(self, args: argparse.Namespace) -> NotificationPayload:
        data = None
        if args.data:
            try:
                data = json.loads(args.data)
            except ValueError:
                raise ValidationError("--data must be a JSON object")
            if not isinstance(data, dict):
                raise ValidationError("--data must be a JSON object")
        return NotificationPayload(
            title=args.title,
            body=args.body,
            icon=args.icon,
            badge=args.badge,
            tag=args.tag,
            data=data,
        )

    def render(self, outcome: PushOutcome, as_json: bool = False) -> None:
        if as_json:
            self._print(json.dumps(outcome.to_dict(), indent=2))
            return
        mark = "OK" if outcome.success else "FAILED"
        status = f" [{outcome.status_code}]" if outcome.status_code is not None else ""
        self._print(f"{mark}{status}: {outcome.message}")
        if outcome.details:
            self._print(f"  {outcome.details}")

    def cmd_show(self, args: argparse.Namespace) -> int:
        if self.saved.is_empty():
            self._print("No saved configuration.")
            return 0
        data = self.saved.to_dict()
        if self.saved.vapid is not None:
            data['vapid']['privateKey'] = mask_secret(self.saved.vapid.private_key)
        self._print(json.dumps(data, indent=2, ensure_ascii=False))
        self._print(config.APP_DISCLAIMER.rstrip())
        return 0

    def cmd_clear(self, args: argparse.Namespace) -> int:
        if not api.clear_config():
            self._print("Could not delete the saved configuration.")
            return 1
        self._print("Saved configuration deleted.")
        return 0

    def cmd_generate_keys(self, args: argparse.Namespace) -> int:
        public_key, private_key = generate_vapid_keys()
        self._print(f"Public key:  {public_key}")
        self._print(f"Private key: {private_key}")
        if args.save:
            identity = VapidIdentity(public_key, private_key, args.subject)
            if not api.save_config(PersistedConfig(vapid=identity, last_subscription=self.saved.last_subscription)):
                self._print("Could not save the keypair.")
                return 1
            self._print("Keypair saved.")
        return 0

    def cmd_save(self, args: argparse.Namespace) -> int:
        try:
            target = self._target_from(args)
        except ValidationError as e:
            self.render(PushOutcome(success=False, message=config.VALIDATION_ERROR_MESSAGE, details=e.reason))
            return 1
        identity = self._identity_from(args)
        persisted = PersistedConfig(
            vapid=identity if identity.has_keys() or identity.subject else None,
            last_subscription=target if target.endpoint else None,
        )
        if not api.save_config(persisted):
            self._print("Could not save the configuration.")
            return 1
        self._print("Configuration saved.")
        return 0

    def cmd_send(self, args: argparse.Namespace) -> int:
        try:
            target = self._target_from(args)
            identity = self._identity_from(args)
            payload = self._payload_from(args)
            validate_send_request(target, identity, payload)
        except ValidationError as e:
            self.render(PushOutcome(success=False, message=config.VALIDATION_ERROR_MESSAGE, details=e.reason), args.json)
            return 1

        if args.save and not api.save_config(PersistedConfig(vapid=identity, last_subscription=target)):
            logger.warning("Could not save the configuration before sending")

        outcome = asyncio.run(api.send_push(target, identity, payload, timeout=args.timeout))
        self.render(outcome, args.json)
        return 0 if outcome.success else 1

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = build_parser().parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format=config.LOG_FORMAT
        )
        self.saved = api.load_config()
        handler = getattr(self, "cmd_" + args.command.replace("-", "_"))
        return handler(args)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    return PushTesterApp().run(argv)


if __name__ == "__main__":
    sys.exit(main())
