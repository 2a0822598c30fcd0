"""Test fixtures and configuration."""

import copy
import json

import pytest

from gdpr_userdata.archive import JsonArchive

ARCHIVE_DATA = {
    "ageinfo": [{
        "ageMeta": {
            "ageInfo": {"age": ["13-54"], "birthDate": "1990-01-01"},
            "inferredAgeInfo": {"age": ["25-34"], "birthDate": ""}
        }
    }],
    "screen-name-change": [{
        "screenNameChange": {
            "accountId": "12345",
            "screenNameChange": {
                "changedAt": "2019-05-01T10:00:00.000Z",
                "changedFrom": "old_name",
                "changedTo": "testuser"
            }
        }
    }],
    "protected-history": [{
        "protectedHistory": {"protectedAt": "2020-01-01T00:00:00.000Z", "action": "Protect"}
    }],
    "account-creation-ip": [{
        "accountCreationIp": {"accountId": "12345", "userCreationIp": "192.0.2.1"}
    }],
    "account-timezone": [{
        "accountTimezone": {"accountId": "12345", "timeZone": "Paris"}
    }],
    "connected-application": [
        {
            "connectedApplication": {
                "organization": {"name": "Example Org", "url": "https://example.com"},
                "name": "Example App",
                "description": "Posts tea reviews",
                "permissions": ["read", "write"],
                "approvedAt": "2018-03-01T12:00:00.000Z",
                "callbackUrl": "https://example.com/oauth",
                "id": "111"
            }
        },
        {
            "connectedApplication": {
                "organization": {"name": "Old Org"},
                "name": "Old App",
                "permissions": ["read"],
                "approvedAtMsec": "1262304000000",
                "id": "222"
            }
        }
    ],
    "email-address-change": [
        {
            "emailAddressChange": {
                "accountId": "12345",
                "emailChange": {
                    "changedAt": "2017-01-01T00:00:00.000Z",
                    "changedFrom": "",
                    "changedTo": "first@example.com"
                }
            }
        },
        {
            "emailAddressChange": {
                "accountId": "12345",
                "emailChange": {
                    "changedAt": "2021-06-01T00:00:00.000Z",
                    "changedFrom": "first@example.com",
                    "changedTo": "current@example.com"
                }
            }
        }
    ],
    "ip-audit": [
        {"ipAudit": {"accountId": "12345", "createdAt": "2022-01-02T08:00:00.000Z", "loginIp": "198.51.100.7"}},
        {"ipAudit": {"accountId": "12345", "createdAt": "2022-01-01T08:00:00.000Z", "loginIp": "198.51.100.8"}}
    ],
    "ni-devices": [
        {"niDeviceResponse": {"pushDevice": {"deviceType": "Android", "deviceVersion": "10"}}},
        {"niDeviceResponse": {"messagingDevice": {"deviceType": "Auth", "phoneNumber": "+33600000000"}}}
    ],
    "verified": [{"verified": {"accountId": "12345", "verified": True}}],
    "phone-number": [{"device": {"phoneNumber": "+33600000000"}}],
    "personalization": [{
        "p13nData": {
            "demographics": {
                "languages": [
                    {"language": "English", "isDisabled": False},
                    {"language": "French", "isDisabled": False},
                    {"language": "English", "isDisabled": False}
                ],
                "genderInfo": {"gender": "female"}
            },
            "interests": {
                "interests": [
                    {"name": "Python", "isDisabled": False},
                    {"name": "Tea", "isDisabled": False},
                    {"name": "Python", "isDisabled": False}
                ],
                "partnerInterests": [{"name": "Gardening"}],
                "audienceAndAdvertisers": {
                    "numAudiences": "0",
                    "advertisers": ["@acme", "@teashop", "@acme"]
                },
                "shows": ["Show A", "Show B", "Show A"]
            },
            "inferredAgeInfo": {"age": ["18-24"], "birthDate": ""}
        }
    }],
    "account": [{
        "account": {
            "email": "current@example.com",
            "createdVia": "web",
            "username": "testuser",
            "accountId": "12345",
            "createdAt": "2010-01-01T00:00:00.000Z",
            "accountDisplayName": "Test User"
        }
    }],
    "profile": [{
        "profile": {
            "description": {
                "bio": "Tea enthusiast",
                "website": "https://example.com",
                "location": "Paris"
            },
            "avatarMediaUrl": "https://pbs.twimg.com/profile_images/avatar.jpg",
            "headerMediaUrl": "https://pbs.twimg.com/profile_banners/header.jpg"
        }
    }]
}


@pytest.fixture
def archive_data():
    """Every category of a complete export, keyed like a consolidated archive."""
    return copy.deepcopy(ARCHIVE_DATA)


@pytest.fixture
def json_archive(archive_data):
    return JsonArchive(archive_data)


@pytest.fixture
def archive_file(tmp_path, archive_data):
    """Consolidated single-file archive."""
    path = tmp_path / "testuser_archive.json"
    with open(path, 'w') as f:
        json.dump(archive_data, f)
    return path


@pytest.fixture
def archive_dir(tmp_path, archive_data):
    """Extracted export directory with window.YTD-wrapped data files."""
    root = tmp_path / "twitter-export"
    data_dir = root / "data"
    data_dir.mkdir(parents=True)
    for name, content in archive_data.items():
        variable = name.replace('-', '_')
        with open(data_dir / f"{name}.js", 'w', encoding='utf-8') as f:
            f.write(f"window.YTD.{variable}.part0 = {json.dumps(content, indent=2)}")
    return root
