"""Tests for the UserData record and its dump/load_part contract."""

from datetime import datetime, timezone

import orjson
import pytest

from gdpr_userdata.aggregation import aggregate
from gdpr_userdata.errors import InvalidDateFormat
from gdpr_userdata.models import AgeInfo, ConnectedApplication, EmailAddressChange, LoginIpRecord
from gdpr_userdata.user import FIELDS, UserData

T = datetime(2021, 6, 1, tzinfo=timezone.utc)


def test_email_address_tie_keeps_first_entry():
    user = UserData(email_address_changes=[
        EmailAddressChange(changed_at=datetime(2020, 1, 1, tzinfo=timezone.utc),
                           changed_from=None, changed_to="old@example.com"),
        EmailAddressChange(changed_at=T, changed_from="old@example.com", changed_to="a@example.com"),
        EmailAddressChange(changed_at=T, changed_from="a@example.com", changed_to="b@example.com"),
    ])
    assert user.email_address == "a@example.com"


def test_email_address_uses_latest_change_not_last_entry():
    user = UserData(email_address_changes=[
        EmailAddressChange(changed_at=T, changed_from=None, changed_to="latest@example.com"),
        EmailAddressChange(changed_at=datetime(2019, 1, 1, tzinfo=timezone.utc),
                           changed_from=None, changed_to="older@example.com"),
    ])
    assert user.email_address == "latest@example.com"


def test_email_address_without_history():
    assert UserData().email_address is None


def test_dump_contains_every_field():
    assert tuple(UserData().dump()) == FIELDS


def test_merge_leaves_absent_fields_untouched():
    user = UserData(phone_number="+33600000000", timezone="Paris")
    user.load_part({'phone_number': "+14155550100"})
    assert user.phone_number == "+14155550100"
    assert user.timezone == "Paris"


def test_load_part_overwrites_with_explicit_none():
    user = UserData(timezone="Paris")
    user.load_part({'timezone': None})
    assert user.timezone is None


def test_load_part_ignores_unknown_keys():
    user = UserData(verified=True)
    assert user.load_part({'favourite_tea': 'oolong'}) is user
    assert user.verified is True


def test_load_part_does_not_mutate_input():
    partial = {'login_ips': [{'created_at': "2022-01-01T08:00:00Z", 'login_ip': "10.0.0.1"}]}
    UserData().load_part(partial)
    assert partial['login_ips'][0]['created_at'] == "2022-01-01T08:00:00Z"


def test_load_part_coerces_string_dates():
    user = UserData().load_part({
        'email_address_changes': [
            {'changed_at': "2021-06-01T00:00:00.000Z", 'changed_from': None, 'changed_to': "x@example.com"},
        ],
        'login_ips': [{'created_at': "Wed Oct 10 20:19:24 +0000 2018", 'login_ip': "10.0.0.1"}],
        'applications': [{'id': "1", 'name': "App", 'approved_at': "2018-03-01T12:00:00Z"}],
        'screen_name_history': [{'changed_from': "a", 'changed_to': "b", 'changed_at': "2019-05-01T10:00:00Z"}],
    })
    assert user.email_address_history[0].changed_at == T
    assert user.last_logins[0] == LoginIpRecord(
        created_at=datetime(2018, 10, 10, 20, 19, 24, tzinfo=timezone.utc), login_ip="10.0.0.1")
    assert isinstance(user.authorized_applications[0].approved_at, datetime)
    assert isinstance(user.screen_name_history[0].changed_at, datetime)


def test_load_part_rejects_malformed_date_strings():
    with pytest.raises(InvalidDateFormat):
        UserData().load_part({'login_ips': [{'created_at': "last tuesday", 'login_ip': "10.0.0.1"}]})


def test_load_part_accepts_model_instances():
    change = EmailAddressChange(changed_at=T, changed_from=None, changed_to="x@example.com")
    user = UserData().load_part({'email_address_changes': [change]})
    assert user.email_address_history == [change]


def test_age_range_survives_load_part():
    user = UserData().load_part({'age_info': {'age': [13, 17], 'birth_date': None, 'inferred': {'age': 30}}})
    assert user.age.age == (13, 17)
    assert user.age.inferred.age == 30


def test_age_info_accepts_nested_instance():
    user = UserData().load_part({'age_info': {'age': 30, 'inferred': AgeInfo(age=(18, 24))}})
    assert user.age.age == 30
    assert user.age.inferred == AgeInfo(age=(18, 24))


@pytest.mark.parametrize("value, expected", [
    (True, True),
    (False, False),
    (None, False),
    ("false", False),
    ("True", True),
])
def test_load_part_verified_flag(value, expected):
    user = UserData(verified=not expected).load_part({'verified': value})
    assert user.verified is expected


def test_load_part_rejects_unknown_verified_value():
    with pytest.raises(TypeError):
        UserData().load_part({'verified': "maybe"})


def test_application_extra_fields_survive_load_part():
    app = ConnectedApplication(id="1", name="App", approved_at=T, extra={'callbackUrl': "https://example.com/cb"})
    user = UserData().load_part(orjson.loads(orjson.dumps({'applications': [app.to_dict()]})))
    assert user.authorized_applications == [app]


@pytest.mark.asyncio
async def test_round_trip_from_live_dump(json_archive):
    full_user = await aggregate(json_archive)
    restored = UserData().load_part(full_user.dump())
    assert restored.dump() == full_user.dump()
    assert restored.email_address == full_user.email_address
    assert restored.age == full_user.age


@pytest.mark.asyncio
async def test_round_trip_through_json_text(json_archive):
    full_user = await aggregate(json_archive)
    text_form = orjson.loads(orjson.dumps(full_user.dump()))
    assert isinstance(text_form['login_ips'][0]['created_at'], str)

    restored = UserData().load_part(text_form)
    assert restored.dump() == full_user.dump()
    assert restored.last_logins == full_user.last_logins
    assert restored.authorized_applications == full_user.authorized_applications


@pytest.mark.asyncio
async def test_incremental_build_from_partial_snapshots(json_archive):
    full_user = await aggregate(json_archive)
    snapshot = full_user.dump()
    user = UserData()
    user.load_part({'summary': snapshot['summary']})
    user.load_part({'email_address_changes': snapshot['email_address_changes']})

    assert user.screen_name == "testuser"
    assert user.email_address == "current@example.com"
    assert user.timezone is None


@pytest.mark.asyncio
async def test_summary_accessors(json_archive):
    full_user = await aggregate(json_archive)
    assert full_user.screen_name == "testuser"
    assert full_user.id == "12345"
    assert full_user.name == "Test User"
    assert full_user.bio == "Tea enthusiast"
    assert full_user.location == "Paris"
    assert full_user.created_at == "2010-01-01T00:00:00.000Z"
    assert full_user.url == "https://example.com"
    assert full_user.profile_img_url.endswith("avatar.jpg")
    assert full_user.profile_banner_url.endswith("header.jpg")


def test_list_accessors_are_copies():
    user = UserData(login_ips=[LoginIpRecord(created_at=T, login_ip="10.0.0.1")])
    user.last_logins.clear()
    assert len(user.last_logins) == 1
