"""Unit tests for application settings."""

from app.config.settings import Settings


class TestSettings:
    def test_only_server_side_supabase_keys(self):
        fields = set(Settings.model_fields)
        assert {"supabase_url", "supabase_jwks_url", "supabase_service_role_key"} <= fields
        assert "supabase_anon_key" not in fields

    def test_unused_keys_in_env_file_are_ignored(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("SUPABASE_URL=https://example.supabase.co\nSUPABASE_ANON_KEY=public-anon-key\n")

        loaded = Settings(_env_file=env_file)

        assert loaded.supabase_url == "https://example.supabase.co"
        assert not hasattr(loaded, "supabase_anon_key")

    def test_admin_requires_service_role_key(self):
        url = "https://example.supabase.co"
        without_key = Settings(_env_file=None, supabase_url=url, supabase_service_role_key="")
        with_key = Settings(_env_file=None, supabase_url=url, supabase_service_role_key="key")

        assert without_key.supabase_admin_enabled is False
        assert with_key.supabase_admin_enabled is True
