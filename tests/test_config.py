"""Tests for configuration loading and validation"""

import pytest

from netops_ai.config.settings import DEFAULT_VENDOR_ALLOWLIST, AICoreConfig

CONFIG_VARS = [
    'WATSONX_API_KEYS', 'WATSONX_API_KEY', 'WATSONX_REGION', 'WATSONX_PROJECT_ID',
    'WATSONX_URL', 'WATSONX_TEMPERATURE', 'NVD_API_KEY', 'NETOPS_CVE_CACHE_FILE',
    'NETOPS_VENDOR_ALLOWLIST', 'NETOPS_SEVERITY_THRESHOLD', 'NETOPS_REFRESH_INTERVAL',
]


@pytest.fixture
def clean_env(monkeypatch):
    # set-then-delete so values loaded from a .env file are removed afterwards
    for var in CONFIG_VARS:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    return monkeypatch


def test_defaults(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("")

    config = AICoreConfig.from_env(str(env_file))

    assert config.watsonx_api_keys is None
    assert config.vendor_allowlist == DEFAULT_VENDOR_ALLOWLIST
    assert config.severity_threshold == 7.0
    assert config.freshness_window == 900
    assert config.refresh_interval == 300
    assert config.generation_url == \
        "https://us-south.ml.cloud.ibm.com/ml/v1/text/generation?version=2024-01-10"


def test_env_file_values(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "WATSONX_API_KEYS=key-a,key-b\n"
        "WATSONX_REGION=eu-de\n"
        "NETOPS_VENDOR_ALLOWLIST=Cisco, Juniper\n"
        "NETOPS_SEVERITY_THRESHOLD=9.0\n"
    )

    config = AICoreConfig.from_env(str(env_file))

    assert config.watsonx_api_keys == "key-a,key-b"
    assert config.vendor_allowlist == ("cisco", "juniper")
    assert config.severity_threshold == 9.0
    assert config.generation_url.startswith("https://eu-de.ml.cloud.ibm.com/")


def test_single_key_fallback(clean_env, tmp_path):
    clean_env.setenv('WATSONX_API_KEY', "only-key")
    config = AICoreConfig.from_env(str(tmp_path / "missing.env"))
    assert config.watsonx_api_keys == "only-key"


@pytest.mark.parametrize('raw, expected', [
    ("0.7", 0.7),
    ("1.5", 0.1),
    ("-0.2", 0.1),
    ("warm", 0.1),
])
def test_temperature_bounds(clean_env, tmp_path, raw, expected):
    clean_env.setenv('WATSONX_TEMPERATURE', raw)
    assert AICoreConfig.from_env(str(tmp_path / "missing.env")).watsonx_temperature == expected


def test_explicit_url_overrides_region():
    config = AICoreConfig(watsonx_url="http://localhost:8080/", watsonx_region="eu-de")
    assert config.generation_url == "http://localhost:8080/ml/v1/text/generation?version=2024-01-10"


def test_validate():
    assert AICoreConfig(watsonx_api_keys="k", watsonx_project_id="p", nvd_api_key="n").validate() == []

    issues = AICoreConfig(refresh_interval=0, severity_threshold=11.0, vendor_allowlist=()).validate()
    assert any("WATSONX_API_KEYS" in issue for issue in issues)
    assert any("Refresh interval" in issue for issue in issues)
    assert any("Severity threshold" in issue for issue in issues)
    assert any("allow-list" in issue for issue in issues)


def test_missing_watsonx_settings():
    assert AICoreConfig(watsonx_api_keys="k", watsonx_project_id="p").missing_watsonx_settings() == []
    assert AICoreConfig(watsonx_api_keys="k", watsonx_project_id="p", watsonx_region="",
                        watsonx_url="http://localhost:8080").missing_watsonx_settings() == []
    assert AICoreConfig(watsonx_region="").missing_watsonx_settings() == [
        "WATSONX_API_KEYS", "WATSONX_PROJECT_ID", "WATSONX_REGION",
    ]
