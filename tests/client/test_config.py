import os
from unittest.mock import patch

from client.config import ClientSettings, get_client_settings


class TestClientSettings:
    def test_reads_public_prefix(self):
        with patch.dict(os.environ, {
            "PUBLIC_SUPABASE_URL": "https://test.supabase.co",
            "PUBLIC_SUPABASE_ANON_KEY": "anon-key",
        }):
            settings = ClientSettings(_env_file=None)
        assert settings.supabase_url == "https://test.supabase.co"
        assert settings.supabase_anon_key == "anon-key"

    def test_ignores_server_variables(self):
        with patch.dict(os.environ, {
            "SUPABASE_URL": "https://server.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "service-key",
        }, clear=True):
            settings = ClientSettings(_env_file=None)
        assert settings.supabase_url == ""
        assert "service_role" not in str(settings.model_dump())

    def test_cached(self):
        get_client_settings.cache_clear()
        assert get_client_settings() is get_client_settings()
