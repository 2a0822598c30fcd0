"""Per-category extraction of account metadata from an export.

Each extractor reads one category through an ``ArchiveAccessor`` and
normalizes it into the models of ``models.py``. Extractors raise freely on
missing files or unexpected shapes; ``aggregation`` is responsible for
substituting the field default.
"""

import logging
from typing import Any, Iterable, List, Optional

from .archive import ArchiveAccessor
from .dates import parse_msec_timestamp, parse_twitter_date
from .errors import ArchiveError
from .models import (
    Age,
    AgeInfo,
    ConnectedApplication,
    Demographics,
    DeviceRegistry,
    EmailAddressChange,
    Interests,
    LoginIpRecord,
    Personalization,
    ProfileSummary,
    ScreenNameChange,
)

logger = logging.getLogger(__name__)

DEFAULT_AGE = 20


def parse_age(values: Optional[List[str]]) -> Age:
    """Parse Twitter's age list: ``["13-17"]`` -> ``(13, 17)``, ``["34"]`` -> ``34``.

    Only the first element is read. An empty or missing list gives
    ``DEFAULT_AGE``.
    """
    if not values:
        return DEFAULT_AGE

    first = str(values[0])
    parts = first.split('-')
    if len(parts) > 1:
        return (int(parts[0]), int(parts[1]))
    return int(first)


def _unique(items: Iterable[Any]) -> List[Any]:
    """Deduplicate, keeping first-seen order."""
    return list(dict.fromkeys(items))


def _inferred_age(raw: dict) -> Optional[AgeInfo]:
    """Twitter's guess, or None if its age value is unreadable (e.g. ``"65+"``)."""
    try:
        age = parse_age(raw.get('age'))
    except ValueError as e:
        logger.debug(f"Skipping unreadable inferred age {raw.get('age')!r}: {e}")
        return None
    return AgeInfo(age=age, birth_date=raw.get('birthDate'))


def attach_inferred_age(age_info: AgeInfo, inferred: AgeInfo) -> bool:
    """Attach a personalization-derived guess unless one is already known.

    The dedicated age file takes precedence; the personalization value is
    only a fallback. Returns True if ``inferred`` was attached.
    """
    if age_info.inferred is not None:
        logger.debug("Keeping inferred age from the age file over personalization")
        return False
    age_info.inferred = inferred
    return True


async def _single(archive: ArchiveAccessor, category: str) -> dict:
    """First record of a one-record category file."""
    return (await archive.get_file(category))[0]


async def extract_age_info(archive: ArchiveAccessor, category: str = 'ageinfo.js') -> AgeInfo:
    age_meta = (await _single(archive, category))['ageMeta']
    age = age_meta['ageInfo']

    info = AgeInfo(age=parse_age(age.get('age')), birth_date=age.get('birthDate'))
    if age_meta.get('inferredAgeInfo'):
        info.inferred = _inferred_age(age_meta['inferredAgeInfo'])
    return info


async def extract_screen_name_history(archive: ArchiveAccessor,
                                      category: str = 'screen-name-change.js') -> List[ScreenNameChange]:
    history = []
    for entry in await archive.get_file(category):
        change = entry['screenNameChange']['screenNameChange']
        history.append(ScreenNameChange(
            changed_from=change.get('changedFrom'),
            changed_to=change['changedTo'],
            changed_at=parse_twitter_date(change['changedAt']),
        ))
    return history


async def extract_protected_history(archive: ArchiveAccessor,
                                    category: str = 'protected-history.js') -> List[dict]:
    """Protect/unprotect events, kept as exported."""
    return [dict(entry['protectedHistory']) for entry in await archive.get_file(category)]


async def extract_creation_ip(archive: ArchiveAccessor,
                              category: str = 'account-creation-ip.js') -> Optional[str]:
    return (await _single(archive, category))['accountCreationIp']['userCreationIp']


async def extract_timezone(archive: ArchiveAccessor,
                           category: str = 'account-timezone.js') -> Optional[str]:
    return (await _single(archive, category))['accountTimezone']['timeZone']


# Keys of a connectedApplication record mapped to ConnectedApplication attributes
_APPLICATION_KEYS = {'id', 'name', 'description', 'permissions', 'organization',
                     'approvedAt', 'approvedAtMsec'}


async def extract_applications(archive: ArchiveAccessor,
                               category: str = 'connected-application.js') -> List[ConnectedApplication]:
    apps = []
    for entry in await archive.get_file(category):
        app = entry['connectedApplication']

        if app.get('approvedAt'):
            approved_at = parse_twitter_date(app['approvedAt'])
        else:
            # Older exports only carry a stringified epoch in milliseconds
            approved_at = parse_msec_timestamp(app.get('approvedAtMsec'))

        apps.append(ConnectedApplication(
            id=app.get('id'),
            name=app.get('name'),
            approved_at=approved_at,
            description=app.get('description'),
            permissions=list(app.get('permissions') or []),
            organization=dict(app.get('organization') or {}),
            extra={k: v for k, v in app.items() if k not in _APPLICATION_KEYS},
        ))
    return apps


async def extract_email_address_changes(archive: ArchiveAccessor,
                                        category: str = 'email-address-change.js') -> List[EmailAddressChange]:
    changes = []
    for entry in await archive.get_file(category):
        mail = entry['emailAddressChange']['emailChange']
        changes.append(EmailAddressChange(
            changed_at=parse_twitter_date(mail['changedAt']),
            changed_from=mail.get('changedFrom'),
            changed_to=mail.get('changedTo'),
        ))
    return changes


async def extract_login_ips(archive: ArchiveAccessor,
                            category: str = 'ip-audit.js') -> List[LoginIpRecord]:
    return [
        LoginIpRecord(
            created_at=parse_twitter_date(entry['ipAudit']['createdAt']),
            login_ip=entry['ipAudit']['loginIp'],
        )
        for entry in await archive.get_file(category)
    ]


async def extract_devices(archive: ArchiveAccessor, category: str = 'ni-devices.js') -> DeviceRegistry:
    registry = DeviceRegistry()
    for entry in await archive.get_file(category):
        device = entry['niDeviceResponse']
        if device.get('pushDevice'):
            registry.push_devices.append(dict(device['pushDevice']))
        elif device.get('messagingDevice'):
            registry.messaging_devices.append(dict(device['messagingDevice']))
    return registry


async def extract_verified(archive: ArchiveAccessor, category: str = 'verified.js') -> bool:
    verified = (await _single(archive, category))['verified']['verified']
    if not isinstance(verified, bool):
        raise TypeError(f"Unexpected verified flag: {verified!r}")
    return verified


async def extract_phone_number(archive: ArchiveAccessor,
                               category: str = 'phone-number.js') -> Optional[str]:
    # Accounts without a registered number have no phoneNumber key
    return (await _single(archive, category))['device'].get('phoneNumber')


async def extract_summary(archive: ArchiveAccessor, category: str = 'account.js',
                          profile_category: str = 'profile.js') -> ProfileSummary:
    """Profile summary from the account file, completed by the profile file."""
    account = (await _single(archive, category))['account']
    summary = ProfileSummary(
        screen_name=account.get('username') or "",
        full_name=account.get('accountDisplayName') or "",
        created_at=account.get('createdAt') or "",
        id=account.get('accountId') or "",
    )

    try:
        profile = (await _single(archive, profile_category))['profile']
    except (ArchiveError, LookupError, TypeError) as e:
        logger.debug(f"No profile details in {profile_category}: {e}")
        return summary

    description = profile.get('description') or {}
    summary.bio = description.get('bio') or ""
    summary.location = description.get('location') or ""
    summary.url = description.get('website') or None
    summary.profile_image_url_https = profile.get('avatarMediaUrl')
    summary.profile_banner_url = profile.get('headerMediaUrl')
    return summary


async def extract_personalization(archive: ArchiveAccessor, category: str = 'personalization.js',
                                  age_info: Optional[AgeInfo] = None) -> Personalization:
    """Languages, gender and interests Twitter attributes to the owner.

    Must run after age extraction: an ``inferredAgeInfo`` found here is
    attached to ``age_info`` when that record has no inferred age yet.
    """
    p13n = (await _single(archive, category))['p13nData']

    demographics = p13n.get('demographics') or {}
    languages = _unique(lang['language'] for lang in demographics.get('languages') or [])
    gender_info = demographics.get('genderInfo') or {}

    interests = p13n.get('interests') or {}
    audience = interests.get('audienceAndAdvertisers') or {}

    personalization = Personalization(
        demographics=Demographics(
            languages=languages,
            gender=gender_info.get('gender') or "",
        ),
        interests=Interests(
            names=_unique(interest['name'] for interest in interests.get('interests') or []),
            advertisers=_unique(audience.get('advertisers') or []),
            partner_interests=list(interests.get('partnerInterests') or []),
            shows=_unique(interests.get('shows') or []),
        ),
    )

    if p13n.get('inferredAgeInfo') and age_info is not None:
        inferred = _inferred_age(p13n['inferredAgeInfo'])
        if inferred is not None:
            attach_inferred_age(age_info, inferred)

    return personalization
