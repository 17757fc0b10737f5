import json

import pytest

from plantpal.preferences import ThemePreference


@pytest.fixture
def prefs(tmp_path):
    return ThemePreference(str(tmp_path / "nested" / "preferences.json"))


def test_defaults_to_light(prefs):
    assert prefs.load() == "light"


@pytest.mark.parametrize("os_preference, expected", [("dark", "dark"), ("light", "light"), ("sepia", "light")])
def test_falls_back_to_os_preference(prefs, os_preference, expected):
    assert prefs.load(os_preference) == expected


def test_stored_value_wins_over_os(prefs):
    prefs.save("light")
    assert prefs.load(os_preference="dark") == "light"


def test_toggle_writes_through(prefs):
    assert prefs.toggle("light") == "dark"
    with open(prefs.path, encoding="utf-8") as f:
        assert json.load(f) == {"theme": "dark"}
    assert ThemePreference(prefs.path).load() == "dark"

    assert prefs.toggle("dark") == "light"
    assert prefs.load(os_preference="dark") == "light"


def test_rejects_unknown_theme(prefs):
    with pytest.raises(ValueError):
        prefs.save("neon")


@pytest.mark.parametrize("content", ["{broken", '{"theme": "neon"}', "[]"])
def test_bad_stored_values_are_ignored(tmp_path, content):
    path = tmp_path / "preferences.json"
    path.write_text(content, encoding="utf-8")

    assert ThemePreference(str(path)).load(os_preference="dark") == "dark"
