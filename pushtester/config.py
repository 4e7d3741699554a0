"""
Configuration constants for the Web Push Tester application.
"""

import os

# Application Metadata
APP_VERSION = "1.0.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "Web Push Tester"  # Use: Full name of the application. Type: str. Range: Any valid string.
# Use: Notice printed under the saved configuration. Type: str (multi-line). Range: Any valid string.
APP_DISCLAIMER = """\
The private key is stored obfuscated with a key derived from constants shipped
with this tool. It protects against casual disk inspection only.
"""

# Storage Settings
CONFIG_DIR_NAME = ".pushtester"  # Use: Name of the hidden directory within the user's home directory where the tester stores its configuration. Type: str. Range: Any valid directory name.
CONFIG_HOME_ENV = "PUSHTESTER_HOME"  # Use: Environment variable that overrides the configuration directory. Type: str. Range: Any valid environment variable name.
CONFIG_DIR = os.environ.get(CONFIG_HOME_ENV, os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME))  # Use: Directory holding the key/value store file. Type: str. Range: Valid directory path.
STORE_FILE_NAME = "push-tester-config.json"  # Use: Filename of the local key/value store. Type: str. Range: Any valid filename.
CONFIG_RECORD_NAME = "config"  # Use: Name of the record in the key/value store holding the persisted configuration. Type: str. Range: Any non-empty string.

# Security Settings
KEY_SIZE = 32  # Use: Size of the field encryption key in bytes. Corresponds to AES-256. Type: int. Range: 32 bytes.
IV_SIZE = 16  # Use: Size of the AES-CBC initialization vector drawn for every encryption. Type: int. Range: 16 bytes (AES block size).
CIPHERTEXT_SEPARATOR = ":"  # Use: Separator between the hex IV and the hex ciphertext in stored values. Type: str. Range: A single non-hex character.
STORE_PASSPHRASE = "web-push-tester-store"  # Use: Fixed passphrase the field encryption key is derived from. Type: str. Range: Any string. Changing it invalidates stored private keys.
STORE_SALT = b"web-push-tester-salt"  # Use: Fixed salt for the field key derivation. Type: bytes. Range: Any byte string. Changing it invalidates stored private keys.
KDF_ALGORITHM = "scrypt"  # Use: Key derivation function for the field key. Type: str. Range: "scrypt" or "argon2id".
SCRYPT_N = 16384  # Use: scrypt CPU/memory cost parameter. Type: int. Range: Power of two, at least 16384.
SCRYPT_R = 8  # Use: scrypt block size parameter. Type: int. Range: Positive integer, typically 8.
SCRYPT_P = 1  # Use: scrypt parallelization parameter. Type: int. Range: Positive integer, typically 1.
ARGON2_TIME_COST = 2  # Use: Argon2id time cost parameter. Controls the number of iterations. Type: int. Range: Typically 1 to 10.
ARGON2_MEMORY_COST = 65536  # Use: Argon2id memory cost parameter in KiB. Type: int. Range: Recommended to be at least 65536 (64 MB).
ARGON2_PARALLELISM = 4  # Use: Argon2id parallelism parameter. Type: int. Range: Typically 1 to 8.

# Push Settings
PUSH_TIMEOUT_SECONDS = 30  # Use: Default upper bound for a single push-send attempt, in seconds. Type: int. Range: Positive integer.
PUSH_TTL_SECONDS = 0  # Use: TTL header sent to the push service, in seconds. Type: int. Range: 0 (deliver now or drop) and up.
VAPID_SUBJECT_SCHEMES = ("mailto:", "https:")  # Use: URI prefixes accepted as a VAPID subject without normalization. Type: tuple[str]. Range: URI scheme prefixes.
DEFAULT_SUBJECT_SCHEME = "mailto:"  # Use: Prefix added to a bare VAPID subject. Type: str. Range: One of VAPID_SUBJECT_SCHEMES.
PAYLOAD_SIZE_LIMIT = 4096  # Use: Payload size limit most push services enforce, in bytes. Used for a pre-send warning only. Type: int. Range: Positive integer.

# Outcome Texts
PUSH_SUCCESS_MESSAGE = "Push notification sent successfully!"  # Use: Message of a successful outcome. Type: str. Range: Any string.
PUSH_SUCCESS_DETAILS = "Status: {status_code} - The notification was delivered to the push service."  # Use: Details of a successful outcome; formatted with the status code. Type: str. Range: Format string with a {status_code} field.
PUSH_FAILURE_MESSAGE = "Push notification failed"  # Use: Message of a failure that the status table does not cover. Type: str. Range: Any string.
UNKNOWN_ERROR_DETAILS = "Unknown error occurred"  # Use: Details of a failure with neither a body nor an error text. Type: str. Range: Any string.
MISSING_KEYS_MESSAGE = "Missing VAPID keys"  # Use: Message returned when a send is attempted without both VAPID keys. Type: str. Range: Any string.
MISSING_KEYS_DETAILS = "Both public and private VAPID keys are required."  # Use: Details for MISSING_KEYS_MESSAGE. Type: str. Range: Any string.
MISSING_TARGET_MESSAGE = "Missing subscription fields"  # Use: Message returned when a send is attempted without endpoint or subscription keys. Type: str. Range: Any string.
MISSING_TARGET_DETAILS = "The subscription endpoint, p256dh and auth keys are required."  # Use: Details for MISSING_TARGET_MESSAGE. Type: str. Range: Any string.
VALIDATION_ERROR_MESSAGE = "Validation Error"  # Use: Message the shell shows when its own input checks fail. Type: str. Range: Any string.
TIMEOUT_ERROR_DETAILS = "The push service did not respond within {timeout} seconds."  # Use: Details of a timed-out send; formatted with the timeout. Type: str. Range: Format string with a {timeout} field.

# Status code -> (message, details). Use: Fixed classification of push service responses. Type: dict[int, tuple[str, str]].
STATUS_MESSAGES = {
    201: (
        "Push notification sent successfully!",
        "The push service accepted the notification.",
    ),
    400: (
        "Invalid request",
        "The subscription or payload format is incorrect. Check endpoint and keys.",
    ),
    401: (
        "Unauthorized - VAPID key mismatch",
        "The VAPID public key doesn't match the one used when creating the subscription.",
    ),
    403: (
        "Forbidden",
        "The subscription has expired or the user has revoked permission.",
    ),
    404: (
        "Subscription not found",
        "The push subscription no longer exists. The user may have unsubscribed.",
    ),
    410: (
        "Subscription expired",
        "This push subscription is no longer valid. Request a new subscription from the browser.",
    ),
    413: (
        "Payload too large",
        "The notification payload exceeds the size limit (4KB).",
    ),
    429: (
        "Too many requests",
        "You've sent too many notifications. Wait before sending more.",
    ),
}

# Logging
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'  # Use: Format string for the root logger configured by the shell. Type: str. Range: Valid logging format string.
