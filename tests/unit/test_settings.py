"""Unit tests for config/settings.py."""

from config.settings import Settings, get_settings


class TestResolvedDefaultRegionCode:
    def test_default(self):
        s = Settings(default_region_code="us")
        assert s.resolved_default_region_code == "us"

    def test_lowercased(self):
        s = Settings(default_region_code=" GB ")
        assert s.resolved_default_region_code == "gb"

    def test_empty_resolves_to_us(self):
        s = Settings(default_region_code="")
        assert s.resolved_default_region_code == "us"


class TestEnvironment:
    def test_reads_token_from_env(self, monkeypatch):
        monkeypatch.setenv("APPLE_MUSIC_DEVELOPER_TOKEN", "jwt-token")
        monkeypatch.setenv("CATALOG_SEARCH_LIMIT", "25")
        s = Settings()
        assert s.apple_music_developer_token == "jwt-token"
        assert s.catalog_search_limit == 25

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("APPLE_MUSIC_API_BASE", raising=False)
        monkeypatch.delenv("CATALOG_REQUEST_TIMEOUT", raising=False)
        s = Settings()
        assert s.apple_music_api_base == "https://api.music.apple.com"
        assert s.catalog_request_timeout == 10.0


class TestGetSettings:
    def test_returns_settings_instance(self):
        get_settings.cache_clear()
        s = get_settings()
        assert isinstance(s, Settings)

    def test_caches_result(self):
        get_settings.cache_clear()
        s1 = get_settings()
        s2 = get_settings()
        assert s1 is s2
        get_settings.cache_clear()
