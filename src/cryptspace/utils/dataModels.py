import base64
import binascii
import struct

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any

DEFAULT_T_COST = 3
DEFAULT_M_COST_KiB = 65536  # 64 MiB, paid once per sealed file
DEFAULT_PARALLELISM = 2

BLOB_MAGIC = b"CWS1"
BLOB_VERSION = 1
BLOB_HDR_FMT = ">4sBIII16s12s"  # magic, ver, t, m, p, salt(16), nonce(12)
BLOB_HDR_SIZE = struct.calcsize(BLOB_HDR_FMT)
SALT_SIZE = 16
NONCE_SIZE = 12

STORE_VERSION = 1
STORE_SUFFIX = ".json"
DEFAULT_STORE_HOME = Path("~/.cryptspace").expanduser()

ENV_STORE_HOME = "CRYPTSPACE_HOME"
ENV_PASSPHRASE = "CRYPTSPACE_PASSPHRASE"

CONFIRM_ANSWER = "yes"


@dataclass(frozen=True)
class KdfParams:
    t_cost: int = DEFAULT_T_COST
    m_cost_kib: int = DEFAULT_M_COST_KiB
    parallelism: int = DEFAULT_PARALLELISM


@dataclass
class Entry:
    path: str
    size: int
    mode: int
    modified_time: str
    ciphertext: bytes

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        del d["path"]
        d["ciphertext"] = base64.b64encode(self.ciphertext).decode("ascii")
        return d

    @staticmethod
    def from_dict(path: str, obj: Dict[str, Any]) -> "Entry":
        """Rebuild an entry from its on-disk record.

        Raises KeyError, TypeError or ValueError on a malformed record;
        the store turns those into StoreCorruptError.
        """
        if not isinstance(obj, dict):
            raise TypeError(f"record for {path} is not an object")
        try:
            ciphertext = base64.b64decode(obj["ciphertext"], validate=True)
        except binascii.Error as exc:
            raise ValueError(f"bad ciphertext encoding for {path}") from exc
        return Entry(
            path=path,
            size=int(obj["size"]),
            mode=int(obj["mode"]),
            modified_time=str(obj["modified_time"]),
            ciphertext=ciphertext,
        )
