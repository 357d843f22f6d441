import json
import logging
import os
import tempfile
import time

from pathlib import Path
from typing import Dict

from cryptspace.utils.dataModels import STORE_VERSION, Entry
from cryptspace.utils.errors import NotInitializedError, StoreCorruptError, WorkspaceIOError

logger = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


class EntryStore:
    """The path -> Entry mapping of one workspace, persisted as a single JSON file.

    Every save rewrites the whole document through a temp file and an atomic
    rename, so the file on disk is always the last complete snapshot.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.entries: Dict[str, Entry] = {}

    def exists(self) -> bool:
        return self.path.is_file()

    def init(self) -> None:
        try:
            self.path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceIOError(f"cannot create {self.path.parent}: {exc}") from exc
        self.entries = {}
        self.save()
        logger.info("initialized entry store at %s", self.path)

    def load(self) -> Dict[str, Entry]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise NotInitializedError() from exc
        except OSError as exc:
            raise WorkspaceIOError(f"cannot read {self.path}: {exc}") from exc
        self.entries = self._decode(raw)
        logger.debug("loaded %d entries from %s", len(self.entries), self.path)
        return self.entries

    def save(self) -> None:
        write_atomic(self.path, self._encode())
        logger.debug("saved %d entries to %s", len(self.entries), self.path)

    def destroy(self) -> None:
        try:
            self.path.unlink()
        except OSError as exc:
            raise WorkspaceIOError(f"cannot remove {self.path}: {exc}") from exc
        self.entries = {}
        logger.info("removed entry store %s", self.path)

    def backup(self, suffix: str | None = None) -> Path:
        """Write the current mapping next to the store as <store>.backup.<suffix>."""
        suffix = suffix or str(int(time.time()))
        target = self.path.with_name(f"{self.path.name}.backup.{suffix}")
        write_atomic(target, self._encode())
        logger.info("backed up %d entries to %s", len(self.entries), target)
        return target

    def _encode(self) -> bytes:
        doc = {
            "version": STORE_VERSION,
            "entries": {path: entry.to_dict() for path, entry in sorted(self.entries.items())},
        }
        try:
            return json.dumps(doc, ensure_ascii=False, indent=1).encode("utf-8")
        except UnicodeEncodeError as exc:
            raise WorkspaceIOError(f"cannot serialize {self.path}: {exc}") from exc

    def _decode(self, raw: bytes) -> Dict[str, Entry]:
        try:
            doc = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreCorruptError(f"{self.path} is not valid JSON: {exc}") from exc
        if not isinstance(doc, dict) or not isinstance(doc.get("entries"), dict):
            raise StoreCorruptError(f"{self.path} has an unexpected layout")
        if doc.get("version") != STORE_VERSION:
            raise StoreCorruptError(f"unsupported store version {doc.get('version')!r}")
        try:
            return {path: Entry.from_dict(path, rec) for path, rec in doc["entries"].items()}
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreCorruptError(f"{self.path} has a malformed entry: {exc}") from exc


def write_atomic(path: Path, data: bytes, mode: int = FILE_MODE) -> None:
    """Replace path with data via a sibling temp file; the old file survives any failure."""
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise WorkspaceIOError(f"cannot write {path}: {exc}") from exc
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except OSError as exc:
        try:
            tmp.unlink(missing_ok=True)
        except OSError as cleanup_exc:
            logger.debug("could not remove %s: %s", tmp, cleanup_exc)
        raise WorkspaceIOError(f"cannot write {path}: {exc}") from exc
