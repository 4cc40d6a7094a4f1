"""
Tests for settings loading and API URL resolution.
"""
import json

from gamelog.utils.settings import (
    API_URL_ENV,
    DEFAULT_API_BASE_URL,
    get_api_base_url,
    load_settings,
    save_settings,
)


def test_missing_settings_file(tmp_path):
    assert load_settings(str(tmp_path / "settings.json")) == {}


def test_corrupt_settings_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2")
    assert load_settings(str(path)) == {}


def test_non_object_settings_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(["api_base_url"]))
    assert load_settings(str(path)) == {}


def test_save_and_load_round_trip(tmp_path):
    path = str(tmp_path / "nested" / "settings.json")
    assert save_settings({"api_base_url": "https://example.test/api"}, path)
    assert load_settings(path) == {"api_base_url": "https://example.test/api"}


def test_env_var_wins(monkeypatch):
    monkeypatch.setenv(API_URL_ENV, "https://env.example.test/api/")
    assert get_api_base_url({"api_base_url": "https://settings.example.test"}) == "https://env.example.test/api"


def test_settings_used_without_env(monkeypatch):
    monkeypatch.delenv(API_URL_ENV, raising=False)
    assert get_api_base_url({"api_base_url": "https://settings.example.test/"}) == "https://settings.example.test"


def test_default_url(monkeypatch):
    monkeypatch.delenv(API_URL_ENV, raising=False)
    assert get_api_base_url({}) == DEFAULT_API_BASE_URL
