"""Tests for the locally persisted theme preference."""
import pytest

from resource_tracker.errors import ValidationError
from resource_tracker.models.settings import Preference, Theme
from resource_tracker.state.theme import THEME_KEY, ThemeStore, set_preference


def test_defaults_to_system(session_factory):
    store = ThemeStore(session_factory)

    assert store.load() == Theme.SYSTEM


def test_survives_new_store(session_factory):
    ThemeStore(session_factory).set_theme("dark")

    assert ThemeStore(session_factory).load() == Theme.DARK


def test_single_row_under_theme_key(session_factory):
    store = ThemeStore(session_factory)
    store.set_theme(Theme.LIGHT)
    store.set_theme(Theme.DARK)

    db = session_factory()
    try:
        rows = db.query(Preference).filter(Preference.key == THEME_KEY).all()
    finally:
        db.close()
    assert [row.value for row in rows] == ["dark"]


def test_invalid_stored_value_falls_back(session_factory):
    db = session_factory()
    try:
        set_preference(db, THEME_KEY, "sepia")
    finally:
        db.close()

    assert ThemeStore(session_factory).load() == Theme.SYSTEM


def test_rejects_unknown_theme(session_factory):
    with pytest.raises(ValidationError):
        ThemeStore(session_factory).set_theme("sepia")


@pytest.mark.parametrize(
    "start,prefers_dark,expected",
    [
        (Theme.LIGHT, False, Theme.DARK),
        (Theme.DARK, False, Theme.SYSTEM),
        (Theme.SYSTEM, True, Theme.LIGHT),
        (Theme.SYSTEM, False, Theme.DARK),
    ],
)
def test_toggle_cycle(session_factory, start, prefers_dark, expected):
    store = ThemeStore(session_factory)
    store.set_theme(start)

    assert store.toggle(prefers_dark) == expected
    assert ThemeStore(session_factory).load() == expected
