"""Tests for configuration loading."""

import pytest

from smartspend.config import (
    AppSettings,
    ConfigurationError,
    GeminiSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No .env file and no relevant environment variables."""
    monkeypatch.chdir(tmp_path)
    for name in ("GEN_API_KEY", "GEMINI_API_KEY", "GEMINI_MODEL_NAME", "GEMINI_TEMPERATURE",
                 "APP_MERCHANT_TOP_N", "APP_SUPPORTED_IMAGE_FORMATS", "APP_MAX_UPLOAD_SIZE_MB"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestGeminiSettings:
    """The AI service key and model options."""

    def test_reads_gen_api_key(self, clean_env):
        clean_env.setenv("GEN_API_KEY", "abc")
        assert get_settings().gemini.api_key == "abc"

    def test_accepts_gemini_api_key(self, clean_env):
        clean_env.setenv("GEMINI_API_KEY", "xyz")
        assert GeminiSettings().api_key == "xyz"

    def test_defaults(self, clean_env):
        clean_env.setenv("GEN_API_KEY", "abc")
        settings = GeminiSettings()
        assert settings.model_name == "gemini-2.5-flash"
        assert settings.temperature == 0.2

    def test_model_name_override(self, clean_env):
        clean_env.setenv("GEN_API_KEY", "abc")
        clean_env.setenv("GEMINI_MODEL_NAME", "gemini-pro")
        assert GeminiSettings().model_name == "gemini-pro"

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("GEN_API_KEY=from-file\n", encoding="utf-8")
        assert GeminiSettings().api_key == "from-file"

    def test_missing_key_fails_on_access(self, clean_env):
        settings = get_settings()
        with pytest.raises(ConfigurationError, match="GEN_API_KEY"):
            _ = settings.gemini


class TestAppSettings:
    """Application options."""

    def test_defaults(self, clean_env):
        settings = AppSettings()
        assert settings.merchant_top_n == 5
        assert settings.supported_formats_list == ["jpg", "jpeg", "png", "webp"]
        assert settings.max_upload_size_bytes == 10 * 1024 * 1024

    def test_formats_are_normalized(self, clean_env):
        clean_env.setenv("APP_SUPPORTED_IMAGE_FORMATS", " PNG, Jpg ")
        assert AppSettings().supported_formats_list == ["png", "jpg"]

    def test_top_n_override(self, clean_env):
        clean_env.setenv("APP_MERCHANT_TOP_N", "3")
        assert get_settings().app.merchant_top_n == 3

    def test_only_used_options_are_declared(self):
        assert set(AppSettings.model_fields) == {
            "log_level",
            "max_upload_size_mb",
            "supported_image_formats",
            "merchant_top_n",
            "export_filename_prefix",
        }


class TestValidateAllSettings:
    """Settings page summary."""

    def test_all_valid(self, clean_env):
        clean_env.setenv("GEN_API_KEY", "abc")
        assert validate_all_settings() == {"gemini": True, "app": True}

    def test_missing_key_reported(self, clean_env):
        results = validate_all_settings()
        assert results["gemini"] is False
        assert "GEN_API_KEY" in results["gemini_error"]
        assert results["app"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
