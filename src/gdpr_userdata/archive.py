"""Access to the category files of a Twitter export."""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import aiofiles
import orjson

from .errors import NotFound, ParseError

logger = logging.getLogger(__name__)

# window.YTD.ageinfo.part0 = [ ... ]
_YTD_PREFIX = re.compile(r'^\s*window\.[\w.$\[\]"\'-]+\s*=\s*')


def clean_json_string(json_string: str) -> str:
    """Remove the JavaScript assignment wrapping an export file."""
    cleaned = _YTD_PREFIX.sub('', json_string, count=1)
    return cleaned.strip().rstrip(';')


def category_key(category: str) -> str:
    """Normalise ``"ageinfo.js"`` and ``"ageinfo"`` to the same key."""
    name = Path(category).name
    return name[:-3] if name.endswith('.js') else name


class ArchiveAccessor(ABC):
    """Source of parsed category files for one export."""

    @abstractmethod
    async def get_file(self, category: str) -> Any:
        """Return the parsed content of ``category``.

        Raises:
            NotFound: the archive has no such file.
            ParseError: the file could not be decoded.
        """
        pass


class DirectoryArchive(ArchiveAccessor):
    """An extracted export: ``<root>/data/<category>.js`` files."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _resolve(self, category: str) -> Optional[Path]:
        filename = f"{category_key(category)}.js"
        for candidate in (self.root / 'data' / filename, self.root / filename):
            if candidate.is_file():
                return candidate
        return None

    async def get_file(self, category: str) -> Any:
        path = self._resolve(category)
        if path is None:
            raise NotFound(category, f"No file for {category} under {self.root}")

        try:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                raw = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(category, f"Could not read {path}: {e}") from e

        try:
            return orjson.loads(clean_json_string(raw))
        except orjson.JSONDecodeError as e:
            raise ParseError(category, f"Invalid JSON in {path}: {e}") from e


class JsonArchive(ArchiveAccessor):
    """Categories held in memory, keyed by category name without ``.js``.

    Also used for consolidated single-file archives such as the
    community archive dumps (``{"account": [...], "ip-audit": [...]}``).
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data: Dict[str, Any] = {category_key(k): v for k, v in data.items()}

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'JsonArchive':
        """Load a consolidated JSON archive from disk."""
        path = Path(file_path)
        try:
            data = orjson.loads(path.read_bytes())
        except OSError as e:
            raise NotFound(str(path), f"Cannot open archive {path}: {e}") from e
        except orjson.JSONDecodeError as e:
            raise ParseError(str(path), f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ParseError(str(path), f"Expected a JSON object in {path}")
        logger.debug(f"Loaded consolidated archive {path} with {len(data)} categories")
        return cls(data)

    @property
    def categories(self):
        return sorted(self._data)

    async def get_file(self, category: str) -> Any:
        key = category_key(category)
        if key not in self._data:
            raise NotFound(category)
        return self._data[key]


def open_archive(path: Union[str, Path]) -> ArchiveAccessor:
    """Pick the accessor matching ``path``: a directory or a JSON file."""
    path = Path(path)
    if path.is_dir():
        return DirectoryArchive(path)
    return JsonArchive.from_file(path)
