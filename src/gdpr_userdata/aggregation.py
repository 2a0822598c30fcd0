"""Concurrent aggregation of every category extractor into a UserData."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from .archive import ArchiveAccessor
from .config import UserDataConfig
from .extractors import (
    extract_age_info,
    extract_applications,
    extract_creation_ip,
    extract_devices,
    extract_email_address_changes,
    extract_login_ips,
    extract_personalization,
    extract_phone_number,
    extract_protected_history,
    extract_screen_name_history,
    extract_summary,
    extract_timezone,
    extract_verified,
)
from .models import AgeInfo, DeviceRegistry, Personalization, ProfileSummary
from .user import UserData

logger = logging.getLogger(__name__)


@dataclass
class ExtractionOutcome:
    """Diagnostics for one extractor run. Never affects the record."""
    field: str
    category: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FieldExtractor:
    """An extractor bound to the record field it fills."""
    field: str
    extract: Callable[..., Awaitable[Any]]
    default: Callable[[], Any]
    # Config keys of additional category files passed after the main one
    extra_categories: Tuple[str, ...] = ()


AGE_EXTRACTOR = FieldExtractor('age_info', extract_age_info, AgeInfo)
PERSONALIZATION_EXTRACTOR = FieldExtractor('personalization', extract_personalization, Personalization)

INDEPENDENT_EXTRACTORS: List[FieldExtractor] = [
    FieldExtractor('screen_name_history', extract_screen_name_history, list),
    FieldExtractor('protected_history', extract_protected_history, list),
    FieldExtractor('creation_ip', extract_creation_ip, lambda: None),
    FieldExtractor('timezone', extract_timezone, lambda: None),
    FieldExtractor('applications', extract_applications, list),
    FieldExtractor('email_address_changes', extract_email_address_changes, list),
    FieldExtractor('login_ips', extract_login_ips, list),
    FieldExtractor('devices', extract_devices, DeviceRegistry),
    FieldExtractor('verified', extract_verified, lambda: False),
    FieldExtractor('phone_number', extract_phone_number, lambda: None),
    FieldExtractor('summary', extract_summary, ProfileSummary, extra_categories=('profile',)),
]

EXTRACTOR_COUNT = len(INDEPENDENT_EXTRACTORS) + 2


class Aggregator:
    """Runs all extractors against one archive and merges the results.

    Independent extractors run concurrently. Personalization starts only
    once age extraction has finished, since it may complete the age
    record's inferred age. A failing extractor yields its field default.
    """

    def __init__(self, config: Optional[UserDataConfig] = None,
                 progress: Optional[Callable[[ExtractionOutcome], None]] = None):
        self.config = config or UserDataConfig()
        self.progress = progress

    async def aggregate(self, archive: ArchiveAccessor) -> UserData:
        user, _ = await self.aggregate_with_report(archive)
        return user

    async def aggregate_with_report(self, archive: ArchiveAccessor) -> Tuple[UserData, List[ExtractionOutcome]]:
        """Aggregate ``archive`` and report which categories fell back to defaults.

        The archive is only referenced for the duration of this call.
        """
        age_task = asyncio.ensure_future(self._run(AGE_EXTRACTOR, archive))

        async def personalization_after_age():
            age_info, _ = await age_task
            return await self._run(PERSONALIZATION_EXTRACTOR, archive, age_info)

        extractors = [AGE_EXTRACTOR, *INDEPENDENT_EXTRACTORS, PERSONALIZATION_EXTRACTOR]
        results = await asyncio.gather(
            age_task,
            *(self._run(extractor, archive) for extractor in INDEPENDENT_EXTRACTORS),
            personalization_after_age(),
        )

        values = {}
        outcomes = []
        for extractor, (value, outcome) in zip(extractors, results):
            values[extractor.field] = value
            outcomes.append(outcome)

        failed = [o.category for o in outcomes if not o.ok]
        if failed:
            logger.info(f"Defaulted {len(failed)}/{len(outcomes)} categories: {', '.join(failed)}")
        logger.debug("Aggregation finished, archive released")

        return UserData(**values), outcomes

    async def _run(self, extractor: FieldExtractor, archive: ArchiveAccessor,
                   *args: Any) -> Tuple[Any, ExtractionOutcome]:
        category = self.config.category(extractor.field)
        extra = [self.config.category(name) for name in extractor.extra_categories]

        try:
            value = await extractor.extract(archive, category, *extra, *args)
            outcome = ExtractionOutcome(extractor.field, category)
        except Exception as e:
            logger.debug(f"Using default for {extractor.field}, {category} unavailable: {e!r}")
            value = extractor.default()
            outcome = ExtractionOutcome(extractor.field, category, error=e)

        if self.progress:
            self.progress(outcome)
        return value, outcome


async def aggregate(archive: ArchiveAccessor, config: Optional[UserDataConfig] = None) -> UserData:
    """Build a UserData from ``archive`` with the default aggregator."""
    return await Aggregator(config).aggregate(archive)
