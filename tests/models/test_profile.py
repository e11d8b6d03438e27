from datetime import date

import pytest
from pydantic import ValidationError

from gamermatch.models.profile import Genre, Platform, PlayTime, Profile, ProfileUpdate, calculate_age
from tests.conftest import build_profile


def test_complete_profile_is_discoverable():
    profile = build_profile("alice")
    assert profile.is_discoverable()


@pytest.mark.parametrize(
    "overrides",
    [
        {"is_active": False},
        {"is_banned": True},
        {"onboarding_completed": False},
    ],
)
def test_profile_not_discoverable(overrides):
    assert not build_profile("alice", **overrides).is_discoverable()


def test_partial_profile_allowed_before_onboarding():
    profile = Profile(id="new", display_name="newbie", date_of_birth=date(2000, 1, 1))
    assert profile.platforms == []
    assert profile.onboarding_completed is False


@pytest.mark.parametrize(
    "missing, message",
    [
        ({"region": None}, "region"),
        ({"platforms": []}, "platform"),
        ({"favorite_genres": []}, "genre"),
        ({"top_games": []}, "game"),
        ({"playstyle": None}, "playstyle"),
    ],
)
def test_onboarding_requires_gaming_fields(missing, message):
    with pytest.raises(ValidationError) as exc_info:
        build_profile("alice", **missing)
    assert message in str(exc_info.value)


def test_underage_rejected():
    today = date.today()
    with pytest.raises(ValidationError):
        build_profile("kid", date_of_birth=date(today.year - 17, 1, 1))


@pytest.mark.parametrize("name", ["a", "x" * 31, "bad name", "emoji🎮"])
def test_invalid_display_names(name):
    with pytest.raises(ValidationError):
        build_profile("alice", display_name=name)


def test_display_name_is_trimmed():
    assert build_profile("alice", display_name="  gamer_1  ").display_name == "gamer_1"


def test_too_many_genres_rejected():
    with pytest.raises(ValidationError):
        build_profile("alice", favorite_genres=list(Genre)[:6])


def test_top_games_limits():
    with pytest.raises(ValidationError):
        build_profile("alice", top_games=["a", "b", "c", "d"])
    with pytest.raises(ValidationError):
        build_profile("alice", top_games=["   "])


def test_photo_urls_must_be_http():
    with pytest.raises(ValidationError):
        build_profile("alice", photo_urls=["ftp://example.com/a.png"])
    profile = build_profile("alice", photo_urls=["https://cdn.example.com/a.png"])
    assert profile.photo_urls == ["https://cdn.example.com/a.png"]


def test_duplicates_are_removed():
    profile = build_profile(
        "alice",
        platforms=[Platform.PC, Platform.PC, Platform.XBOX],
        typical_play_times=[PlayTime.NIGHT, PlayTime.NIGHT],
    )
    assert profile.platforms == [Platform.PC, Platform.XBOX]
    assert profile.typical_play_times == [PlayTime.NIGHT]


def test_blank_bio_becomes_none():
    assert build_profile("alice", bio="   ").bio is None


def test_calculate_age_before_and_after_birthday():
    dob = date(2000, 6, 15)
    assert calculate_age(dob, today=date(2020, 6, 14)) == 19
    assert calculate_age(dob, today=date(2020, 6, 15)) == 20


def test_profile_update_tracks_set_fields():
    update = ProfileUpdate(bio="Looking for a duo partner")
    assert update.model_dump(exclude_unset=True) == {"bio": "Looking for a duo partner"}
