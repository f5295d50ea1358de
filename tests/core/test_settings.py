"""Tests for settings.py module."""

from datetime import timedelta

import pytest

from town_doctor import settings


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Isolate from env vars and any pyproject [tool.town-doctor] section."""
    for var in (
        "TOWN_DOCTOR_STALE_THRESHOLD",
        "TOWN_DOCTOR_BD",
        "TOWN_DOCTOR_BD_TIMEOUT",
        "TOWN_DOCTOR_TOWN_ROOT",
        "GT_TOWN_ROOT",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(settings, "_load_pyproject_settings", lambda: {})


def use_pyproject(monkeypatch, values: dict) -> None:
    monkeypatch.setattr(settings, "_load_pyproject_settings", lambda: values)


class TestStaleThreshold:
    def test_default(self):
        assert settings.get_stale_threshold() == timedelta(hours=1)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TOWN_DOCTOR_STALE_THRESHOLD", "30m")
        assert settings.get_stale_threshold() == timedelta(minutes=30)

    def test_pyproject(self, monkeypatch):
        use_pyproject(monkeypatch, {"stale-threshold": "2h"})
        assert settings.get_stale_threshold() == timedelta(hours=2)

    def test_pyproject_seconds(self, monkeypatch):
        use_pyproject(monkeypatch, {"stale-threshold": 900})
        assert settings.get_stale_threshold() == timedelta(minutes=15)

    def test_env_beats_pyproject(self, monkeypatch):
        use_pyproject(monkeypatch, {"stale-threshold": "2h"})
        monkeypatch.setenv("TOWN_DOCTOR_STALE_THRESHOLD", "10m")
        assert settings.get_stale_threshold() == timedelta(minutes=10)

    def test_invalid(self, monkeypatch):
        monkeypatch.setenv("TOWN_DOCTOR_STALE_THRESHOLD", "soon")
        with pytest.raises(ValueError):
            settings.get_stale_threshold()


class TestBdSettings:
    def test_defaults(self):
        assert settings.get_bd_command() == "bd"
        assert settings.get_bd_timeout() == 30.0

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TOWN_DOCTOR_BD", "/opt/bin/bd")
        monkeypatch.setenv("TOWN_DOCTOR_BD_TIMEOUT", "2.5")
        assert settings.get_bd_command() == "/opt/bin/bd"
        assert settings.get_bd_timeout() == 2.5

    def test_pyproject(self, monkeypatch):
        use_pyproject(monkeypatch, {"bd-command": "beads", "bd-timeout": 10})
        assert settings.get_bd_command() == "beads"
        assert settings.get_bd_timeout() == 10.0


class TestFindTownRoot:
    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GT_TOWN_ROOT", str(tmp_path))
        assert settings.find_town_root() == tmp_path

    def test_doctor_env_beats_gt_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GT_TOWN_ROOT", str(tmp_path / "gt"))
        monkeypatch.setenv("TOWN_DOCTOR_TOWN_ROOT", str(tmp_path / "doctor"))
        assert settings.find_town_root() == tmp_path / "doctor"

    def test_pyproject(self, monkeypatch, tmp_path):
        use_pyproject(monkeypatch, {"town-root": str(tmp_path)})
        assert settings.find_town_root() == tmp_path

    def test_walks_up_to_marker(self, tmp_path):
        town = tmp_path / "town"
        (town / "mayor").mkdir(parents=True)
        (town / "mayor" / "town.json").write_text("{}")
        deep = town / "gastown" / "polecats" / "toast"
        deep.mkdir(parents=True)
        assert settings.find_town_root(deep) == town.resolve()

    def test_falls_back_to_start(self, tmp_path):
        assert settings.find_town_root(tmp_path) == tmp_path.resolve()
