"""Persisting user records as JSON snapshots."""

import logging
from pathlib import Path
from typing import Optional, Union

import orjson

from .user import UserData

logger = logging.getLogger(__name__)


def dumps_snapshot(user: UserData) -> bytes:
    """Serialize ``user.dump()``; datetimes become RFC 3339 strings."""
    return orjson.dumps(user.dump(), option=orjson.OPT_INDENT_2)


def loads_snapshot(data: Union[bytes, str], user: Optional[UserData] = None) -> UserData:
    """Merge a serialized snapshot into ``user`` (a new record by default)."""
    if user is None:
        user = UserData()
    return user.load_part(orjson.loads(data))


def save_snapshot(user: UserData, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_snapshot(user))
    logger.info(f"Saved user snapshot to {path}")
    return path


def load_snapshot(path: Union[str, Path], user: Optional[UserData] = None) -> UserData:
    """Read a snapshot file; fields it contains overwrite those of ``user``."""
    path = Path(path)
    return loads_snapshot(path.read_bytes(), user)
