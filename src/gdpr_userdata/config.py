"""Configuration for user data extraction."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# Record field -> export file holding it
DEFAULT_CATEGORIES: Dict[str, str] = {
    'age_info': 'ageinfo.js',
    'screen_name_history': 'screen-name-change.js',
    'protected_history': 'protected-history.js',
    'creation_ip': 'account-creation-ip.js',
    'timezone': 'account-timezone.js',
    'applications': 'connected-application.js',
    'email_address_changes': 'email-address-change.js',
    'login_ips': 'ip-audit.js',
    'devices': 'ni-devices.js',
    'verified': 'verified.js',
    'phone_number': 'phone-number.js',
    'personalization': 'personalization.js',
    'summary': 'account.js',
    'profile': 'profile.js',
}


@dataclass
class UserDataConfig:
    """Settings for aggregating an export into a user record.

    ``categories`` can be overridden when an export version names a file
    differently; overrides are merged over ``DEFAULT_CATEGORIES``.
    """
    categories: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORIES))
    log_level: int = logging.INFO
    log_file: Optional[Path] = None
    show_progress: bool = False

    def category(self, name: str) -> str:
        """File name for record field ``name``."""
        return self.categories.get(name, DEFAULT_CATEGORIES[name])

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            'categories': dict(self.categories),
            'log_level': self.log_level,
            'log_file': str(self.log_file) if self.log_file else None,
            'show_progress': self.show_progress,
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'UserDataConfig':
        """Create a config from a dictionary, ignoring unknown keys."""
        config = cls()
        for key, value in config_dict.items():
            if key == 'categories':
                config.categories.update(value or {})
            elif key == 'log_level':
                config.log_level = _level(value)
            elif key == 'log_file':
                config.log_file = Path(value) if value else None
            elif hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.debug(f"Ignoring unknown config key: {key}")
        return config


def _level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else logging.INFO


def load_config(config_path: Optional[Union[str, Path]] = None) -> UserDataConfig:
    """Load configuration from a JSON file, falling back to defaults."""
    if config_path is None:
        return UserDataConfig()

    path = Path(config_path)
    if not path.exists():
        logger.info(f"No config at {path}, using defaults")
        return UserDataConfig()

    try:
        with open(path) as f:
            return UserDataConfig.from_dict(json.load(f))
    except Exception as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return UserDataConfig()
