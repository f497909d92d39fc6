from __future__ import annotations

import pytest

from tmdb_provider.adapters.api.tmdb import DEFAULT_BASE_URL
from tmdb_provider.config import ClientSettings, SettingsError, load_settings


def test_load_settings_from_explicit_path(tmp_path):
    path = tmp_path / "settings.toml"
    path.write_text('[tmdb]\nbase_url = "https://proxy.test/3/"\ntimeout = 5\nlanguage = "de-DE"\n', encoding="utf-8")

    settings = load_settings(path)

    assert settings == ClientSettings(base_url="https://proxy.test/3", timeout=5.0, language="de-DE", source_path=path)


def test_load_settings_from_environment_override(tmp_path):
    path = tmp_path / "custom.toml"
    path.write_text("[tmdb]\nrate_limit_attempts = 1\n", encoding="utf-8")

    settings = load_settings(environ={"TMDB_PROVIDER_SETTINGS_PATH": str(path)})

    assert settings.rate_limit_attempts == 1
    assert settings.base_url == DEFAULT_BASE_URL


def test_load_settings_defaults_when_nothing_found(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    settings = load_settings(environ={"TMDB_PROVIDER_SETTINGS_PATH": str(tmp_path / "nope.toml")})

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.language is None


@pytest.mark.parametrize(
    "body",
    [
        "[tmdb]\ntimeout = -1\n",
        "[tmdb]\nbase_url = ''\n",
        "[tmdb]\nrate_limit_attempts = 0\n",
        "[tmdb]\nkey = 'abc'\n",
        "tmdb = 1\n",
        "[tmdb\n",
    ],
)
def test_load_settings_rejects_invalid_files(tmp_path, body):
    path = tmp_path / "settings.toml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(SettingsError):
        load_settings(path)


def test_load_settings_missing_explicit_path(tmp_path):
    with pytest.raises(SettingsError, match="does not exist"):
        load_settings(tmp_path / "missing.toml")
