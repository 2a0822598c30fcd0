"""Data models for the merged account metadata of an export."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from .dates import coerce_date

# A single age, or an inclusive (low, high) range
Age = Union[int, Tuple[int, int], None]


def _age_to_plain(age: Age) -> Any:
    if isinstance(age, tuple):
        return list(age)
    return age


def _age_from_plain(age: Any) -> Age:
    if isinstance(age, (list, tuple)):
        return (int(age[0]), int(age[1]))
    return age


@dataclass
class AgeInfo:
    """Self-reported age, plus Twitter's guess in ``inferred``."""
    age: Age = None
    birth_date: Optional[str] = None
    inferred: Optional['AgeInfo'] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'age': _age_to_plain(self.age),
            'birth_date': self.birth_date,
            'inferred': self.inferred.to_dict() if self.inferred else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AgeInfo':
        inferred = data.get('inferred')
        if isinstance(inferred, AgeInfo):
            inferred = inferred.to_dict()
        return cls(
            age=_age_from_plain(data.get('age')),
            birth_date=data.get('birth_date'),
            inferred=cls.from_dict(inferred) if inferred else None,
        )


@dataclass
class ScreenNameChange:
    """One change of the account handle."""
    changed_from: str
    changed_to: str
    changed_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            'changed_from': self.changed_from,
            'changed_to': self.changed_to,
            'changed_at': self.changed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScreenNameChange':
        return cls(
            changed_from=data.get('changed_from'),
            changed_to=data.get('changed_to'),
            changed_at=coerce_date(data.get('changed_at')),
        )


@dataclass
class ConnectedApplication:
    """A third-party OAuth application authorised on the account."""
    id: Optional[str]
    name: Optional[str]
    approved_at: datetime
    description: Optional[str] = None
    permissions: List[str] = field(default_factory=list)
    organization: Dict[str, Any] = field(default_factory=dict)
    # Source fields without a dedicated attribute, kept as exported
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'permissions': list(self.permissions),
            'organization': dict(self.organization),
            'approved_at': self.approved_at,
            'extra': dict(self.extra),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConnectedApplication':
        return cls(
            id=data.get('id'),
            name=data.get('name'),
            approved_at=coerce_date(data.get('approved_at')),
            description=data.get('description'),
            permissions=list(data.get('permissions') or []),
            organization=dict(data.get('organization') or {}),
            extra=dict(data.get('extra') or {}),
        )


@dataclass
class EmailAddressChange:
    changed_at: datetime
    changed_from: Optional[str]
    changed_to: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'changed_at': self.changed_at,
            'changed_from': self.changed_from,
            'changed_to': self.changed_to,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EmailAddressChange':
        return cls(
            changed_at=coerce_date(data.get('changed_at')),
            changed_from=data.get('changed_from'),
            changed_to=data.get('changed_to'),
        )


@dataclass
class LoginIpRecord:
    created_at: datetime
    login_ip: str

    def to_dict(self) -> Dict[str, Any]:
        return {'created_at': self.created_at, 'login_ip': self.login_ip}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoginIpRecord':
        return cls(
            created_at=coerce_date(data.get('created_at')),
            login_ip=data.get('login_ip'),
        )


@dataclass
class DeviceRegistry:
    """Devices receiving push notifications or SMS/2FA messages."""
    push_devices: List[Dict[str, Any]] = field(default_factory=list)
    messaging_devices: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'push_devices': [dict(d) for d in self.push_devices],
            'messaging_devices': [dict(d) for d in self.messaging_devices],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeviceRegistry':
        return cls(
            push_devices=[dict(d) for d in data.get('push_devices') or []],
            messaging_devices=[dict(d) for d in data.get('messaging_devices') or []],
        )


@dataclass
class Demographics:
    languages: List[str] = field(default_factory=list)
    gender: str = ""


@dataclass
class Interests:
    names: List[str] = field(default_factory=list)
    advertisers: List[str] = field(default_factory=list)
    partner_interests: List[Any] = field(default_factory=list)
    shows: List[str] = field(default_factory=list)


@dataclass
class Personalization:
    """Attributes Twitter inferred about the account owner.

    ``demographics.languages`` is very approximate; ``interests.shows``
    lists shows the owner might have watched.
    """
    demographics: Demographics = field(default_factory=Demographics)
    interests: Interests = field(default_factory=Interests)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'demographics': {
                'languages': list(self.demographics.languages),
                'gender': self.demographics.gender,
            },
            'interests': {
                'names': list(self.interests.names),
                'advertisers': list(self.interests.advertisers),
                'partner_interests': list(self.interests.partner_interests),
                'shows': list(self.interests.shows),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Personalization':
        demographics = data.get('demographics') or {}
        interests = data.get('interests') or {}
        return cls(
            demographics=Demographics(
                languages=list(demographics.get('languages') or []),
                gender=demographics.get('gender') or "",
            ),
            interests=Interests(
                names=list(interests.get('names') or []),
                advertisers=list(interests.get('advertisers') or []),
                partner_interests=list(interests.get('partner_interests') or []),
                shows=list(interests.get('shows') or []),
            ),
        )


@dataclass
class ProfileSummary:
    """Basic public profile of the archive owner."""
    screen_name: str = ""
    full_name: str = ""
    created_at: str = ""
    location: str = ""
    bio: str = ""
    id: str = ""
    profile_image_url_https: Optional[str] = None
    profile_banner_url: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'screen_name': self.screen_name,
            'full_name': self.full_name,
            'created_at': self.created_at,
            'location': self.location,
            'bio': self.bio,
            'id': self.id,
            'profile_image_url_https': self.profile_image_url_https,
            'profile_banner_url': self.profile_banner_url,
            'url': self.url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileSummary':
        return cls(
            screen_name=data.get('screen_name') or "",
            full_name=data.get('full_name') or "",
            created_at=data.get('created_at') or "",
            location=data.get('location') or "",
            bio=data.get('bio') or "",
            id=data.get('id') or "",
            profile_image_url_https=data.get('profile_image_url_https'),
            profile_banner_url=data.get('profile_banner_url'),
            url=data.get('url'),
        )
