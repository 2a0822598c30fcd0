"""The merged account metadata of one export owner."""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import (
    AgeInfo,
    ConnectedApplication,
    DeviceRegistry,
    EmailAddressChange,
    LoginIpRecord,
    Personalization,
    ProfileSummary,
    ScreenNameChange,
)

logger = logging.getLogger(__name__)

# Keys of dump() / load_part(), in dump order
FIELDS = (
    'age_info',
    'screen_name_history',
    'protected_history',
    'creation_ip',
    'timezone',
    'applications',
    'email_address_changes',
    'login_ips',
    'devices',
    'verified',
    'phone_number',
    'personalization',
    'summary',
)


def _model(cls) -> Callable[[Any], Any]:
    def load(value):
        if value is None:
            return cls()
        if isinstance(value, cls):
            value = value.to_dict()
        return cls.from_dict(value)
    return load


def _flag(value: Any) -> bool:
    """Boolean flag of a snapshot; JSON text may carry it as "true" / "false"."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ('true', 'false'):
        return value.strip().lower() == 'true'
    raise TypeError(f"Unexpected flag value: {value!r}")


def _model_list(cls) -> Callable[[Any], List[Any]]:
    # from_dict coerces string dates of date-bearing entries
    def load(values):
        return [cls.from_dict(v.to_dict() if isinstance(v, cls) else v) for v in values or []]
    return load


_LOADERS: Dict[str, Callable[[Any], Any]] = {
    'age_info': _model(AgeInfo),
    'screen_name_history': _model_list(ScreenNameChange),
    'protected_history': lambda values: [dict(v) for v in values or []],
    'creation_ip': lambda value: value,
    'timezone': lambda value: value,
    'applications': _model_list(ConnectedApplication),
    'email_address_changes': _model_list(EmailAddressChange),
    'login_ips': _model_list(LoginIpRecord),
    'devices': _model(DeviceRegistry),
    'verified': _flag,
    'phone_number': lambda value: value,
    'personalization': _model(Personalization),
    'summary': _model(ProfileSummary),
}


class UserData:
    """Account metadata merged from the category files of an export.

    Built either by ``UserData.from_archive()`` or piece by piece with
    ``load_part()`` from snapshots produced by ``dump()``.
    """

    def __init__(
        self,
        age_info: Optional[AgeInfo] = None,
        screen_name_history: Optional[List[ScreenNameChange]] = None,
        protected_history: Optional[List[dict]] = None,
        creation_ip: Optional[str] = None,
        timezone: Optional[str] = None,
        applications: Optional[List[ConnectedApplication]] = None,
        email_address_changes: Optional[List[EmailAddressChange]] = None,
        login_ips: Optional[List[LoginIpRecord]] = None,
        devices: Optional[DeviceRegistry] = None,
        verified: bool = False,
        phone_number: Optional[str] = None,
        personalization: Optional[Personalization] = None,
        summary: Optional[ProfileSummary] = None,
    ):
        self._age_info = age_info if age_info is not None else AgeInfo()
        self._screen_name_history = screen_name_history or []
        self._protected_history = protected_history or []
        self._creation_ip = creation_ip
        self._timezone = timezone
        self._applications = applications or []
        self._email_address_changes = email_address_changes or []
        self._login_ips = login_ips or []
        self._devices = devices if devices is not None else DeviceRegistry()
        self._verified = verified
        self._phone_number = phone_number
        self._personalization = personalization if personalization is not None else Personalization()
        self._summary = summary if summary is not None else ProfileSummary()

    @classmethod
    async def from_archive(cls, archive, config=None) -> 'UserData':
        """Aggregate every category of ``archive`` into a new record."""
        from .aggregation import Aggregator
        return await Aggregator(config).aggregate(archive)

    def __repr__(self) -> str:
        return f"UserData(screen_name={self.screen_name!r}, id={self.id!r}, verified={self._verified})"

    # Serialization

    def dump(self) -> Dict[str, Any]:
        """Every field of the record, loadable by ``load_part()``.

        Nested values are plain dicts and lists; dates stay ``datetime``.
        """
        return {
            'age_info': self._age_info.to_dict(),
            'screen_name_history': [c.to_dict() for c in self._screen_name_history],
            'protected_history': [dict(e) for e in self._protected_history],
            'creation_ip': self._creation_ip,
            'timezone': self._timezone,
            'applications': [a.to_dict() for a in self._applications],
            'email_address_changes': [c.to_dict() for c in self._email_address_changes],
            'login_ips': [ip.to_dict() for ip in self._login_ips],
            'devices': self._devices.to_dict(),
            'verified': self._verified,
            'phone_number': self._phone_number,
            'personalization': self._personalization.to_dict(),
            'summary': self._summary.to_dict(),
        }

    def load_part(self, partial: Optional[Mapping[str, Any]] = None) -> 'UserData':
        """Overwrite the fields present in ``partial``, leave the others.

        Date strings in email changes, login IPs, applications and screen
        name changes are parsed, so snapshots read back from JSON load the
        same as a live ``dump()``. Nothing else is validated.

        Raises:
            InvalidDateFormat: a date string could not be parsed.
            TypeError: ``verified`` is neither a boolean nor "true" / "false".
        """
        for key, value in (partial or {}).items():
            loader = _LOADERS.get(key)
            if loader is None:
                logger.debug(f"Ignoring unknown user data field: {key}")
                continue
            setattr(self, f"_{key}", loader(value))
        return self

    # Accessors

    @property
    def age(self) -> AgeInfo:
        """Age information; Twitter's own guess, if any, is in ``age.inferred``.

        Ages are an int or an inclusive ``(low, high)`` range.
        """
        return self._age_info

    @property
    def screen_name_history(self) -> List[ScreenNameChange]:
        """History of screen names used, and when they changed."""
        return list(self._screen_name_history)

    @property
    def protected_history(self) -> List[dict]:
        """Protect/unprotect events of the six months before the export."""
        return list(self._protected_history)

    @property
    def account_creation_ip(self) -> Optional[str]:
        return self._creation_ip

    @property
    def timezone(self) -> Optional[str]:
        """Timezone as exported, i.e. ``Paris`` for ``Europe/Paris``."""
        return self._timezone

    @property
    def authorized_applications(self) -> List[ConnectedApplication]:
        """OAuth applications accepted on the account. Often incomplete."""
        return list(self._applications)

    @property
    def email_address_history(self) -> List[EmailAddressChange]:
        return list(self._email_address_changes)

    @property
    def last_logins(self) -> List[LoginIpRecord]:
        """Login IPs, usually limited to the days before the export."""
        return list(self._login_ips)

    @property
    def devices(self) -> DeviceRegistry:
        return self._devices

    @property
    def verified(self) -> bool:
        return self._verified

    @property
    def phone_number(self) -> Optional[str]:
        """Registered phone number (``+<country code>...``), if any."""
        return self._phone_number

    @property
    def personalization(self) -> Personalization:
        return self._personalization

    @property
    def email_address(self) -> Optional[str]:
        """Current email address: target of the most recent change.

        On equal timestamps the first change in history order wins.
        """
        last_address = None
        max_date: Optional[datetime] = None

        for change in self._email_address_changes:
            if max_date is None or change.changed_at > max_date:
                last_address = change.changed_to
                max_date = change.changed_at

        return last_address

    @property
    def summary(self) -> ProfileSummary:
        return self._summary

    @property
    def screen_name(self) -> str:
        return self._summary.screen_name

    @property
    def id(self) -> str:
        return self._summary.id

    @property
    def bio(self) -> str:
        return self._summary.bio

    @property
    def created_at(self) -> str:
        return self._summary.created_at

    @property
    def name(self) -> str:
        """Display name."""
        return self._summary.full_name

    @property
    def location(self) -> str:
        return self._summary.location

    @property
    def profile_img_url(self) -> Optional[str]:
        return self._summary.profile_image_url_https

    @property
    def profile_banner_url(self) -> Optional[str]:
        return self._summary.profile_banner_url

    @property
    def url(self) -> Optional[str]:
        """URL registered on the profile."""
        return self._summary.url
