from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw, Type as Argon2Type
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes

from cryptspace.utils.dataModels import KdfParams

KEY_LEN = 32


def sha3_512_bytes(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA3_512(), backend=default_backend())
    digest.update(data)
    return digest.finalize()


def derive_key(passphrase: str, salt: bytes, params: KdfParams) -> bytes:
    """key = Argon2id(SHA3-512(passphrase)) -> 32 bytes

    Raises ValueError when Argon2 rejects the cost parameters.
    """
    prehash = sha3_512_bytes(passphrase.encode("utf-8"))
    try:
        return hash_secret_raw(
            secret=prehash,
            salt=salt,
            time_cost=params.t_cost,
            memory_cost=params.m_cost_kib,
            parallelism=params.parallelism,
            hash_len=KEY_LEN,
            type=Argon2Type.ID,
        )
    except HashingError as exc:
        raise ValueError(f"invalid KDF parameters: {exc}") from exc
