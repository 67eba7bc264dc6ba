"""NetOps AI Core configuration management with .env file support"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


DEFAULT_VENDOR_ALLOWLIST: Tuple[str, ...] = (
    "cisco", "juniper", "fortinet", "mikrotik",
    "paloalto", "netgear", "dlink", "tplink",
    "ubiquiti", "arista",
)


def _parse_list(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip().lower() for item in raw.split(',') if item.strip())


def _parse_temperature(raw: Optional[str], default: float = 0.1) -> float:
    """Accept WATSONX_TEMPERATURE only when it parses to a value in [0, 1]"""
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logging.warning(f"Ignoring invalid WATSONX_TEMPERATURE={raw!r}")
        return default
    if 0.0 <= value <= 1.0:
        return value
    logging.warning(f"Ignoring out-of-range WATSONX_TEMPERATURE={raw!r}")
    return default


@dataclass
class AICoreConfig:
    """NetOps AI Core configuration"""
    # Vulnerability feed
    nvd_api_key: Optional[str] = None
    nvd_base_url: str = "https://services.nvd.nist.gov/rest/json/cves/2.0"
    nvd_results_per_page: int = 2000
    nvd_timeout: float = 30.0

    # CVE knowledge cache
    cve_cache_file: str = "cve_cache.json"
    freshness_window: int = 900
    fetch_window_days: int = 7
    refresh_interval: int = 300
    severity_threshold: float = 7.0
    vendor_allowlist: Tuple[str, ...] = field(default=DEFAULT_VENDOR_ALLOWLIST)

    # watsonx.ai
    watsonx_api_keys: Optional[str] = None
    watsonx_region: str = "us-south"
    watsonx_project_id: Optional[str] = None
    watsonx_model_id: str = "ibm/granite-3-8b-instruct"
    watsonx_api_version: str = "2024-01-10"
    watsonx_url: Optional[str] = None
    watsonx_timeout: float = 30.0
    watsonx_temperature: float = 0.1
    watsonx_max_new_tokens: int = 200
    iam_token_url: str = "https://iam.cloud.ibm.com/identity/token"
    iam_timeout: float = 10.0

    max_concurrent_events: int = 10
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def generation_url(self) -> str:
        """watsonx.ai text generation endpoint"""
        base = self.watsonx_url or f"https://{self.watsonx_region}.ml.cloud.ibm.com"
        return f"{base.rstrip('/')}/ml/v1/text/generation?version={self.watsonx_api_version}"

    def missing_watsonx_settings(self) -> list[str]:
        """Names of unset settings the generation request cannot go without"""
        missing = []
        if not _parse_list(self.watsonx_api_keys):
            missing.append("WATSONX_API_KEYS")
        if not self.watsonx_project_id:
            missing.append("WATSONX_PROJECT_ID")
        if not self.watsonx_region and not self.watsonx_url:
            missing.append("WATSONX_REGION")
        return missing

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'AICoreConfig':
        """Load configuration from environment variables and .env file"""

        if env_file:
            env_path = Path(env_file)
        else:
            # Look for .env in current directory and up to 3 parent directories
            current_dir = Path.cwd()
            env_path = None
            for path in [current_dir] + list(current_dir.parents)[:3]:
                potential_env = path / ".env"
                if potential_env.exists():
                    env_path = potential_env
                    break

        if env_path and env_path.exists():
            load_dotenv(env_path)
            logging.info(f"Loaded configuration from {env_path}")
        elif env_file:
            logging.warning(f"Specified .env file not found: {env_file}")

        allowlist = _parse_list(os.getenv('NETOPS_VENDOR_ALLOWLIST')) or DEFAULT_VENDOR_ALLOWLIST

        return cls(
            nvd_api_key=os.getenv('NVD_API_KEY') or None,
            nvd_base_url=os.getenv('NETOPS_NVD_BASE_URL',
                                   "https://services.nvd.nist.gov/rest/json/cves/2.0"),
            nvd_results_per_page=int(os.getenv('NETOPS_NVD_RESULTS_PER_PAGE', '2000')),
            cve_cache_file=os.getenv('NETOPS_CVE_CACHE_FILE', 'cve_cache.json'),
            freshness_window=int(os.getenv('NETOPS_FRESHNESS_WINDOW', '900')),
            fetch_window_days=int(os.getenv('NETOPS_FETCH_WINDOW_DAYS', '7')),
            refresh_interval=int(os.getenv('NETOPS_REFRESH_INTERVAL', '300')),
            severity_threshold=float(os.getenv('NETOPS_SEVERITY_THRESHOLD', '7.0')),
            vendor_allowlist=allowlist,
            watsonx_api_keys=os.getenv('WATSONX_API_KEYS') or os.getenv('WATSONX_API_KEY') or None,
            watsonx_region=os.getenv('WATSONX_REGION', 'us-south'),
            watsonx_project_id=os.getenv('WATSONX_PROJECT_ID') or None,
            watsonx_model_id=os.getenv('WATSONX_MODEL_ID', 'ibm/granite-3-8b-instruct'),
            watsonx_api_version=os.getenv('WATSONX_API_VERSION', '2024-01-10'),
            watsonx_url=os.getenv('WATSONX_URL') or None,
            watsonx_timeout=float(os.getenv('WATSONX_TIMEOUT_SECONDS', '30')),
            watsonx_temperature=_parse_temperature(os.getenv('WATSONX_TEMPERATURE')),
            watsonx_max_new_tokens=int(os.getenv('WATSONX_MAX_NEW_TOKENS', '200')),
            iam_token_url=os.getenv('IBM_IAM_TOKEN_URL',
                                    "https://iam.cloud.ibm.com/identity/token"),
            iam_timeout=float(os.getenv('NETOPS_IAM_TIMEOUT', '10')),
            max_concurrent_events=int(os.getenv('NETOPS_MAX_CONCURRENT', '10')),
            log_level=os.getenv('NETOPS_LOG_LEVEL', 'INFO'),
            log_file=os.getenv('NETOPS_LOG_FILE') or None,
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues"""
        issues = []

        if not _parse_list(self.watsonx_api_keys):
            issues.append("WATSONX_API_KEYS not set - events will get degraded verdicts")

        if not self.watsonx_project_id:
            issues.append("WATSONX_PROJECT_ID not set - generation requests will be rejected")

        if not self.watsonx_region and not self.watsonx_url:
            issues.append("WATSONX_REGION not set")

        if not self.nvd_api_key:
            issues.append("NVD API key not set - feed requests are rate limited to 5 requests/30s")

        if self.freshness_window <= 0:
            issues.append("Freshness window must be positive")

        if self.refresh_interval <= 0:
            issues.append("Refresh interval must be positive")

        if self.fetch_window_days <= 0:
            issues.append("Fetch window must be at least one day")

        if not 0.0 <= self.severity_threshold <= 10.0:
            issues.append("Severity threshold must be between 0.0 and 10.0")

        if not self.vendor_allowlist:
            issues.append("Vendor allow-list is empty - every feed refresh will fall back to unfiltered CVEs")

        if self.max_concurrent_events <= 0:
            issues.append("Max concurrent events must be positive")

        return issues
