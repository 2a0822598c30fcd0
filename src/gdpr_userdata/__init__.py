from .aggregation import Aggregator, ExtractionOutcome, aggregate
from .archive import ArchiveAccessor, DirectoryArchive, JsonArchive, open_archive
from .config import UserDataConfig, load_config
from .dates import parse_twitter_date
from .errors import ArchiveError, InvalidDateFormat, NotFound, ParseError
from .extractors import parse_age
from .snapshot import dumps_snapshot, load_snapshot, loads_snapshot, save_snapshot
from .user import UserData

__all__ = [
    'Aggregator',
    'ExtractionOutcome',
    'aggregate',
    'ArchiveAccessor',
    'DirectoryArchive',
    'JsonArchive',
    'open_archive',
    'UserDataConfig',
    'load_config',
    'parse_twitter_date',
    'ArchiveError',
    'InvalidDateFormat',
    'NotFound',
    'ParseError',
    'parse_age',
    'dumps_snapshot',
    'load_snapshot',
    'loads_snapshot',
    'save_snapshot',
    'UserData',
]
