import dataclasses
import logging
import os
import stat

from pathlib import Path
from typing import Callable, Dict, List

from cryptspace.crypto.aead import PassphraseCipher
from cryptspace.storage.entry_store import EntryStore, write_atomic
from cryptspace.utils.dataModels import Entry
from cryptspace.utils.errors import (
    Aborted, AlreadyExistsError, NotFoundError, NotInitializedError, NotTrackedError,
    PassphraseError, StoreCorruptError, WorkspaceIOError,
)
from cryptspace.utils.helper import format_items, rel_time_iso, resolve_path, walk_files

logger = logging.getLogger(__name__)

ConfirmFunc = Callable[[str], bool]


def _decline(prompt: str) -> bool:
    return False


class Workspace:
    """A set of tracked files bound to a local root and one metadata file.

    The passphrase and the confirmation callable are supplied by the caller.
    Without a confirm callable every bulk operation is declined.
    """

    def __init__(self, local_root: Path, store_path: Path, passphrase: str | None = None,
                 confirm: ConfirmFunc | None = None, cipher: PassphraseCipher | None = None):
        self.local_root = Path(os.path.abspath(local_root))
        self.store = EntryStore(store_path)
        self.passphrase = passphrase
        self.confirm = confirm or _decline
        self.cipher = cipher or PassphraseCipher()
        self._loaded = False

    @property
    def store_path(self) -> Path:
        return self.store.path

    @property
    def entries(self) -> Dict[str, Entry]:
        self._require()
        return self.store.entries

    def exists(self) -> bool:
        return self.store.exists()

    def _require(self) -> None:
        if not self.store.exists():
            self._loaded = False
            self.store.entries = {}
            raise NotInitializedError()
        if not self._loaded:
            self.store.load()
            self._loaded = True

    def _ask(self, action: str, items: List[str]) -> None:
        if not self.confirm(format_items(action, items)):
            logger.info("declined: %s (%d items)", action, len(items))
            raise Aborted()

    def init(self) -> None:
        if self.store.exists():
            raise AlreadyExistsError(f"workspace already exists at {self.store.path}")
        self.store.init()
        self._loaded = True

    def list(self) -> List[Entry]:
        self._require()
        return [self.store.entries[p] for p in sorted(self.store.entries)]

    def add(self, path: str | os.PathLike) -> Entry:
        self._require()
        full = resolve_path(self.local_root, path)
        try:
            full.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise WorkspaceIOError(f"path is not valid UTF-8: {full!r}") from exc
        try:
            st = os.stat(full)
        except FileNotFoundError as exc:
            raise NotFoundError(f"no such file: {full}") from exc
        except OSError as exc:
            raise WorkspaceIOError(f"cannot stat {full}: {exc}") from exc
        if not stat.S_ISREG(st.st_mode):
            raise WorkspaceIOError(f"not a regular file: {full}")
        try:
            plaintext = Path(full).read_bytes()
        except OSError as exc:
            raise WorkspaceIOError(f"cannot read {full}: {exc}") from exc

        entry = Entry(
            path=full,
            size=len(plaintext),
            mode=stat.S_IMODE(st.st_mode),
            modified_time=rel_time_iso(st.st_mtime),
            ciphertext=self.cipher.encrypt(plaintext, self.passphrase or ""),
        )
        previous = self.store.entries.get(full)
        self.store.entries[full] = entry
        try:
            self.store.save()
        except WorkspaceIOError:
            if previous is None:
                del self.store.entries[full]
            else:
                self.store.entries[full] = previous
            raise
        logger.info("added %s (%d bytes)", full, entry.size)
        return entry

    def add_tree(self, directory: str | os.PathLike) -> List[Entry]:
        """Add every regular file below directory after confirmation.

        Stops at the first failing file; files added before it stay saved.
        """
        self._require()
        root = resolve_path(self.local_root, directory)
        if not os.path.isdir(root):
            raise NotFoundError(f"no such directory: {root}")
        items = walk_files(Path(root))
        if not items:
            return []
        self._ask("about to add the following files:", items)
        added = []
        for item in items:
            logger.debug("adding %s", item)
            added.append(self.add(item))
        return added

    def remove(self, path: str | os.PathLike) -> bool:
        self._require()
        full = resolve_path(self.local_root, path)
        if full not in self.store.entries:
            logger.debug("remove: %s is not tracked", full)
            return False
        previous = self.store.entries.pop(full)
        try:
            self.store.save()
        except WorkspaceIOError:
            self.store.entries[full] = previous
            raise
        logger.info("removed %s", full)
        return True

    def _lookup(self, path: str | os.PathLike) -> Entry:
        self._require()
        full = resolve_path(self.local_root, path)
        entry = self.store.entries.get(full)
        if entry is None:
            raise NotTrackedError(f"file is not tracked: {full}")
        return entry

    def read(self, path: str | os.PathLike) -> bytes:
        entry = self._lookup(path)
        return self.cipher.decrypt(entry.ciphertext, self.passphrase or "")

    def fetch(self, path: str | os.PathLike) -> Path:
        entry = self._lookup(path)
        plaintext = self.cipher.decrypt(entry.ciphertext, self.passphrase or "")
        dest = Path(entry.path)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceIOError(f"cannot create {dest.parent}: {exc}") from exc
        write_atomic(dest, plaintext, mode=entry.mode)
        logger.info("fetched %s", dest)
        return dest

    def fetch_all(self, pattern: str | None = None) -> List[Path]:
        self._require()
        matches = [p for p in sorted(self.store.entries) if not pattern or pattern in p]
        if not matches:
            return []
        self._ask("about to fetch these files:", matches)
        return [self.fetch(p) for p in matches]

    def destroy(self) -> None:
        """Delete the store after confirmation; an unreadable store can still be destroyed."""
        action = f"destroy workspace {self.store.path}"
        try:
            self._require()
            items = sorted(self.store.entries)
        except StoreCorruptError as exc:
            logger.warning("destroying unreadable store %s: %s", self.store.path, exc)
            action += " (store is unreadable, tracked files cannot be listed)"
            items = []
        self._ask(action, items)
        self.store.destroy()
        self._loaded = False

    def info(self) -> Dict[str, object]:
        self._require()
        return {
            "local_root": str(self.local_root),
            "store_path": str(self.store.path),
            "files": len(self.store.entries),
            "bytes": sum(e.size for e in self.store.entries.values()),
        }

    def backup(self) -> Path:
        self._require()
        return self.store.backup()

    def rotate(self, new_passphrase: str) -> int:
        """Re-encrypt every entry under new_passphrase; nothing is saved unless all succeed."""
        self._require()
        if not new_passphrase:
            raise PassphraseError("new passphrase must not be empty")
        rotated = {}
        for path, entry in self.store.entries.items():
            plaintext = self.cipher.decrypt(entry.ciphertext, self.passphrase or "")
            rotated[path] = dataclasses.replace(entry, ciphertext=self.cipher.encrypt(plaintext, new_passphrase))
        previous = self.store.entries
        self.store.entries = rotated
        try:
            self.store.save()
        except WorkspaceIOError:
            self.store.entries = previous
            raise
        self.passphrase = new_passphrase
        logger.info("rotated passphrase for %d entries", len(rotated))
        return len(rotated)
