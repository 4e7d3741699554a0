"""
Cryptographic operations for the Web Push Tester.

The field key is derived from constants shipped with the application, so this
is obfuscation of the stored private key, not protection against someone who
can read both the store and this code.
"""

import os
import base64
import logging
from functools import lru_cache
from typing import Optional, Tuple
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives import padding, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from cryptography.hazmat.backends import default_backend
from argon2.low_level import hash_secret_raw, Type

from . import config

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _derive_key(algorithm: str, passphrase: str, salt: bytes) -> bytes:
    """Slow KDF run at most once per (algorithm, passphrase, salt) per process."""
    if algorithm == "argon2id":
        return hash_secret_raw(
            secret=passphrase.encode('utf-8'),
            salt=salt,
            time_cost=config.ARGON2_TIME_COST,
            memory_cost=config.ARGON2_MEMORY_COST,
            parallelism=config.ARGON2_PARALLELISM,
            hash_len=config.KEY_SIZE,
            type=Type.ID
        )
    if algorithm == "scrypt":
        kdf = Scrypt(
            salt=salt,
            length=config.KEY_SIZE,
            n=config.SCRYPT_N,
            r=config.SCRYPT_R,
            p=config.SCRYPT_P,
            backend=default_backend()
        )
        return kdf.derive(passphrase.encode('utf-8'))
    raise ValueError(f"Unsupported key derivation algorithm: {algorithm}")


class CryptoManager:
    """Encrypts single string fields as "ivHex:cipherHex" with AES-256-CBC."""

    BLOCK_SIZE = 128  # bits, AES block / PKCS7 padding unit

    def __init__(self, passphrase: str = config.STORE_PASSPHRASE,
                 salt: bytes = config.STORE_SALT,
                 algorithm: str = config.KDF_ALGORITHM):
        self.backend = default_backend()
        self.passphrase = passphrase
        self.salt = salt
        self.algorithm = algorithm

    @property
    def key(self) -> bytes:
        return _derive_key(self.algorithm, self.passphrase, self.salt)

    def encrypt_field(self, plaintext: str) -> str:
        """
        Encrypt a text value with a fresh random IV.

        Args:
            plaintext: Text to protect

        Returns:
            hex(iv) + ":" + hex(ciphertext)
        """
        iv = os.urandom(config.IV_SIZE)
        padder = padding.PKCS7(self.BLOCK_SIZE).padder()
        padded = padder.update(plaintext.encode('utf-8')) + padder.finalize()

        cipher = Cipher(algorithms.AES(self.key), modes.CBC(iv), backend=self.backend)
        encryptor = cipher.encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return iv.hex() + config.CIPHERTEXT_SEPARATOR + ciphertext.hex()

    def decrypt_field(self, value: str) -> Optional[str]:
        """
        Decrypt a value produced by encrypt_field.

        Returns:
            The plaintext, or None if the value is malformed or was encrypted
            under a different key. Never raises.
        """
        try:
            parts = value.split(config.CIPHERTEXT_SEPARATOR)
            if len(parts) != 2:
                logger.warning("Encrypted field has no IV separator")
                return None
            iv = bytes.fromhex(parts[0])
            ciphertext = bytes.fromhex(parts[1])

            cipher = Cipher(algorithms.AES(self.key), modes.CBC(iv), backend=self.backend)
            decryptor = cipher.decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()

            unpadder = padding.PKCS7(self.BLOCK_SIZE).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return plaintext.decode('utf-8')
        except Exception as e:
            logger.warning(f"Could not decrypt stored field: {type(e).__name__}: {e}")
            return None


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def generate_vapid_keys() -> Tuple[str, str]:
    """
    Generate a P-256 VAPID keypair in the format browsers and push libraries use.

    Returns:
        Tuple of (public_key, private_key): the uncompressed public point and the
        raw private scalar, both base64url without padding.
    """
    private_key = ec.generate_private_key(ec.SECP256R1(), default_backend())
    private_bytes = private_key.private_numbers().private_value.to_bytes(32, 'big')
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint
    )
    return _b64url(public_bytes), _b64url(private_bytes)


def _b64url_decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + '=' * (-len(value) % 4))


def public_key_for(private_key: str) -> Optional[str]:
    """
    Public key matching a raw base64url VAPID private key, or None if the
    value is not in that format (PEM/DER keys are not inspected).
    """
    try:
        raw = _b64url_decode(private_key.strip())
        if len(raw) != 32:
            return None
        key = ec.derive_private_key(int.from_bytes(raw, 'big'), ec.SECP256R1(), default_backend())
    except ValueError:
        return None
    public_bytes = key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint
    )
    return _b64url(public_bytes)
