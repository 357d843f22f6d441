import datetime as _dt
import hashlib
import os

from pathlib import Path
from typing import List

from cryptspace.utils.dataModels import DEFAULT_STORE_HOME, ENV_STORE_HOME, STORE_SUFFIX


def store_home(explicit: str | None = None) -> Path:
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get(ENV_STORE_HOME)
    if env:
        return Path(env).expanduser()
    return DEFAULT_STORE_HOME


def store_path_for(local_root: Path, home: Path) -> Path:
    """One metadata file per local directory, named by the SHA-1 of its path."""
    key = hashlib.sha1(str(local_root).encode("utf-8")).hexdigest()
    return home / f"{key}{STORE_SUFFIX}"


def resolve_path(local_root: Path, path: str | os.PathLike) -> str:
    return os.path.normpath(os.path.join(os.path.abspath(local_root), os.fspath(path)))


def rel_time_iso(ts: float | None) -> str:
    if ts is None:
        moment = _dt.datetime.now(_dt.timezone.utc)
    else:
        moment = _dt.datetime.fromtimestamp(ts, _dt.timezone.utc)
    return moment.replace(microsecond=0, tzinfo=None).isoformat() + "Z"


def walk_files(directory: Path) -> List[str]:
    """All regular files below directory, sorted; directories themselves are skipped."""
    return sorted(str(p) for p in Path(directory).rglob("*") if p.is_file())


def display_path(path: str) -> str:
    """Printable form of a path whose name may not be valid UTF-8."""
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def format_items(header: str, items: List[str]) -> str:
    lines = [header]
    lines.extend(f"- {display_path(item)}" for item in items)
    return "\n".join(lines)
