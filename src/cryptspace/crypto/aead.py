"""Passphrase-based sealing of file contents.

Blob layout (big-endian):
    magic      : 4 bytes  -> b"CWS1"
    version    : 1 byte   -> 0x01
    t_cost     : u32
    m_cost     : u32  (KiB)
    parallel   : u32
    salt       : 16 bytes
    nonce      : 12 bytes
    ciphertext : remaining bytes (AES-256-GCM, tag included)

Each blob carries its own salt and KDF parameters, so it can be opened with
the passphrase alone.
"""
import logging
import os
import struct

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from typing import Tuple

from cryptspace.crypto.kdf import derive_key
from cryptspace.utils.dataModels import (
    BLOB_HDR_FMT, BLOB_HDR_SIZE, BLOB_MAGIC, BLOB_VERSION, NONCE_SIZE, SALT_SIZE, KdfParams,
)
from cryptspace.utils.errors import DecryptError, EncryptError

logger = logging.getLogger(__name__)


def aead_encrypt(key: bytes, plaintext: bytes, aad: bytes | None = None) -> Tuple[bytes, bytes]:
    nonce = os.urandom(NONCE_SIZE)
    ct = AESGCM(key).encrypt(nonce, plaintext, aad)
    return nonce, ct


def aead_decrypt(key: bytes, nonce: bytes, ct: bytes, aad: bytes | None = None) -> bytes:
    return AESGCM(key).decrypt(nonce, ct, aad)


class PassphraseCipher:
    """encrypt(plaintext, passphrase) -> blob / decrypt(blob, passphrase) -> plaintext."""

    def __init__(self, params: KdfParams | None = None):
        self.params = params or KdfParams()

    def encrypt(self, plaintext: bytes, passphrase: str) -> bytes:
        if not passphrase:
            raise EncryptError("passphrase is not set")
        p = self.params
        salt = os.urandom(SALT_SIZE)
        try:
            key = derive_key(passphrase, salt, p)
            nonce, ct = aead_encrypt(key, plaintext)
            header = struct.pack(BLOB_HDR_FMT, BLOB_MAGIC, BLOB_VERSION, p.t_cost, p.m_cost_kib, p.parallelism, salt, nonce)
        except (ValueError, TypeError, OverflowError, struct.error) as exc:
            raise EncryptError(f"encryption failed: {exc}") from exc
        return header + ct

    def decrypt(self, blob: bytes, passphrase: str) -> bytes:
        if not passphrase:
            raise DecryptError("passphrase is not set")
        if len(blob) < BLOB_HDR_SIZE:
            raise DecryptError("ciphertext is too small or corrupt")
        magic, ver, t, m, p, salt, nonce = struct.unpack(BLOB_HDR_FMT, blob[:BLOB_HDR_SIZE])
        if magic != BLOB_MAGIC:
            raise DecryptError("invalid ciphertext magic")
        if ver != BLOB_VERSION:
            raise DecryptError(f"unsupported ciphertext version {ver}")
        try:
            key = derive_key(passphrase, salt, KdfParams(t_cost=t, m_cost_kib=m, parallelism=p))
            return aead_decrypt(key, nonce, blob[BLOB_HDR_SIZE:])
        except InvalidTag as exc:
            raise DecryptError("invalid passphrase or corrupted ciphertext") from exc
        except ValueError as exc:
            logger.debug("blob header rejected: t=%s m=%s p=%s", t, m, p)
            raise DecryptError(f"corrupt ciphertext header: {exc}") from exc
