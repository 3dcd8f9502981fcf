"""
Test configuration management
"""
from kiosk_backend.config import Settings, get_settings


def test_settings_singleton():
    """Test settings returns same instance"""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.llm_default_model == "gpt-4o-mini"
    assert settings.llm_default_temperature == 0.2
    assert settings.http_timeout == 30.0
    assert settings.http_max_retries == 0
    assert settings.max_body_bytes == 200 * 1024


def test_crm_base_url_from_subdomain():
    settings = Settings(_env_file=None, repairshopr_subdomain="billingstechguys")
    assert settings.crm_base_url == "https://billingstechguys.repairshopr.com/api/v1"


def test_crm_configured():
    assert not Settings(_env_file=None, repairshopr_subdomain="shop").crm_configured
    assert Settings(
        _env_file=None, repairshopr_subdomain="shop", repairshopr_api_key="k"
    ).crm_configured


def test_cors_origin_list():
    settings = Settings(_env_file=None, cors_origins="https://kiosk.example.com, http://localhost:5173")
    assert settings.cors_origin_list == ["https://kiosk.example.com", "http://localhost:5173"]
