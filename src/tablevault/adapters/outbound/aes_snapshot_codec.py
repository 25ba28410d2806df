"""AES-CBC snapshot codec with OpenSSL-style salted framing.

This adapter implements the SnapshotCodec protocol. The artifact is the
same one CryptoJS's ``AES.encrypt(text, passphrase)`` and
``openssl enc -aes-256-cbc -md md5 -a`` produce, so stores written by
either can be read here and vice versa.

Artifact Format:
    base64( MAGIC (8 bytes) || SALT (8 bytes) || CIPHERTEXT )

    MAGIC      = b"Salted__"
    SALT       = fresh random bytes on every encode
    CIPHERTEXT = AES-CBC(key, iv, PKCS#7(utf-8(json(snapshot))))

Key Derivation (EVP_BytesToKey, one iteration):
    D_1 = MD5(password || salt)
    D_i = MD5(D_{i-1} || password || salt)
    key || iv = first (key_size + 16) bytes of D_1 || D_2 || ...

There is no MAC. A wrong password is only noticed when the padding,
UTF-8 or JSON checks fail.

References:
    - OpenSSL EVP_BytesToKey(3)
"""

from __future__ import annotations

import base64
import binascii
import json
import os
from typing import Callable

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from tablevault.domain.entities import StoreState
from tablevault.infrastructure.config import get_config
from tablevault.infrastructure.logging import get_logger
from tablevault.infrastructure.metrics import MetricsRegistry
from tablevault.ports.outbound.snapshot_codec import DecryptionError, DecryptionFailure

logger = get_logger(__name__)

MAGIC = b"Salted__"
SALT_SIZE = 8
IV_SIZE = 16
HEADER_SIZE = len(MAGIC) + SALT_SIZE


def derive_key_and_iv(
    password: bytes,
    salt: bytes,
    key_size: int = 32,
    iv_size: int = IV_SIZE,
) -> tuple[bytes, bytes]:
    """Derive an AES key and IV from a password and salt.

    Args:
        password: Password bytes (UTF-8 encoded by the caller).
        salt: Per-artifact salt.
        key_size: Key length in bytes.
        iv_size: IV length in bytes.

    Returns:
        (key, iv)
    """
    derived = b""
    block = b""
    while len(derived) < key_size + iv_size:
        digest = hashes.Hash(hashes.MD5())
        digest.update(block + password + salt)
        block = digest.finalize()
        derived += block
    return derived[:key_size], derived[key_size : key_size + iv_size]


def serialize_state(state: StoreState) -> bytes:
    """Canonical text encoding of a snapshot.

    Raises:
        ValueError: If a record holds a float NaN or infinity.
    """
    return json.dumps(
        state.to_dict(),
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    ).encode("utf-8")


class AesSnapshotCodec:
    """Password-based AES-CBC implementation of the SnapshotCodec protocol.

    Attributes:
        key_size: AES key size in bytes (16, 24 or 32).
    """

    def __init__(
        self,
        key_size: int | None = None,
        salt_factory: Callable[[int], bytes] = os.urandom,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the codec.

        Args:
            key_size: AES key size in bytes (default from config).
            salt_factory: Source of salt bytes, given the length wanted.
            metrics: Optional registry for counting decode failures.
        """
        self._key_size = key_size or get_config().codec.key_size
        if self._key_size not in (16, 24, 32):
            raise ValueError(f"Invalid AES key size: {self._key_size}")
        self._salt_factory = salt_factory
        self._metrics = metrics

    @property
    def key_size(self) -> int:
        return self._key_size

    def encode(self, state: StoreState, password: str) -> bytes:
        """Encrypt and frame a snapshot."""
        salt = self._salt_factory(SALT_SIZE)
        if len(salt) != SALT_SIZE:
            raise ValueError(f"Salt factory returned {len(salt)} bytes, expected {SALT_SIZE}")

        key, iv = derive_key_and_iv(password.encode("utf-8"), salt, self._key_size)

        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(serialize_state(state)) + padder.finalize()

        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return base64.b64encode(MAGIC + salt + ciphertext)

    def decode_strict(self, blob: bytes, password: str) -> StoreState:
        """Unframe and decrypt a snapshot.

        Raises:
            DecryptionError: If any stage of the chain fails.
        """
        try:
            frame = base64.b64decode(blob.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecryptionError(DecryptionFailure.FRAMING, f"not base64: {e}") from e

        if len(frame) <= HEADER_SIZE:
            raise DecryptionError(
                DecryptionFailure.FRAMING,
                f"frame too short: {len(frame)} bytes",
            )

        if frame[: len(MAGIC)] != MAGIC:
            raise DecryptionError(
                DecryptionFailure.MAGIC, f"bad magic {frame[: len(MAGIC)]!r}"
            )

        salt = frame[len(MAGIC) : HEADER_SIZE]
        ciphertext = frame[HEADER_SIZE:]
        key, iv = derive_key_and_iv(password.encode("utf-8"), salt, self._key_size)

        try:
            decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            raise DecryptionError(DecryptionFailure.CIPHER, str(e)) from e

        try:
            text = plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError(DecryptionFailure.ENCODING, str(e)) from e

        try:
            return StoreState.from_dict(json.loads(text))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError, as are layout errors
            raise DecryptionError(DecryptionFailure.PAYLOAD, str(e)) from e

    def decode(self, blob: bytes, password: str) -> StoreState:
        """Decode a snapshot, yielding an empty store on any failure.

        A wrong password is indistinguishable from a corrupt file here and
        both read as an empty store.
        """
        try:
            return self.decode_strict(blob, password)
        except DecryptionError as e:
            logger.warning("snapshot_decode_failed", reason=e.reason.value, error=str(e))
            if self._metrics is not None:
                self._metrics.decode_failures_total.labels(reason=e.reason.value).inc()
            return StoreState.empty()
