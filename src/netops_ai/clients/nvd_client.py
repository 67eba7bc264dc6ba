"""NVD API Client"""

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from aiohttp import ClientError, ClientSession, ClientTimeout

from ..config.settings import AICoreConfig
from ..core.errors import FeedUnavailable
from ..core.models import VulnerabilityRecord


USER_AGENT = 'NetOps-AI-Core/1.0.0 (ai-core)'

CVSS_METRIC_VERSIONS = ('cvssMetricV31', 'cvssMetricV30', 'cvssMetricV2')

# cpe:2.3:<part>:<vendor>:<product>:... where components may contain \-escaped characters
CPE_PATTERN = re.compile(r'^cpe:2\.3:[aho*\-]:((?:\\.|[^:\\])+):((?:\\.|[^:\\])+)(?::|$)')
_CPE_UNESCAPE = re.compile(r'\\(.)')


def _nvd_timestamp(value: datetime) -> str:
    return value.strftime('%Y-%m-%dT%H:%M:%S.000Z')


def extract_description(cve_data: Dict) -> str:
    """English description, or an empty string"""
    for desc in cve_data.get('descriptions') or []:
        if isinstance(desc, dict) and desc.get('lang') == 'en':
            return desc.get('value') or ""
    return ""


def extract_cvss_score(cve_data: Dict) -> float:
    """Base score from the most specific CVSS metric block available"""
    metrics = cve_data.get('metrics') or {}
    for version in CVSS_METRIC_VERSIONS:
        entries = metrics.get(version)
        if not entries:
            continue
        try:
            score = entries[0]['cvssData']['baseScore']
            return float(score)
        except (KeyError, IndexError, TypeError, ValueError):
            logging.debug(f"Malformed {version} block, trying next metric version")
    return 0.0


def find_cpe(node: Any) -> Optional[Tuple[str, str]]:
    """Depth-first search for the first CPE 2.3 string in a configuration tree

    Only strings that are themselves CPE formatted strings count; text that
    merely mentions the prefix somewhere inside it is ignored.
    """
    if isinstance(node, str):
        match = CPE_PATTERN.match(node)
        if match:
            vendor, product = (_CPE_UNESCAPE.sub(r'\1', group) for group in match.groups())
            return vendor, product
        return None

    if isinstance(node, dict):
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return None

    for child in children:
        found = find_cpe(child)
        if found:
            return found
    return None


def parse_vulnerability(cve_data: Dict) -> VulnerabilityRecord:
    """Build a record from the ``cve`` object of one feed entry"""
    vendor, product = find_cpe(cve_data.get('configurations')) or ("", "")
    return VulnerabilityRecord(
        cve_id=cve_data.get('id') or "",
        description=extract_description(cve_data),
        published=cve_data.get('published') or "",
        cvss_score=extract_cvss_score(cve_data),
        vendor=vendor.lower(),
        product=product,
    )


class NVDClient:
    """NVD CVE 2.0 feed client"""

    def __init__(self, session: ClientSession, config: AICoreConfig):
        self.session = session
        self.config = config

    async def fetch_recent(self, days: int) -> List[VulnerabilityRecord]:
        """Fetch CVEs published within the last ``days`` days (single page)"""
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=days)

        params = {
            'pubStartDate': _nvd_timestamp(start),
            'pubEndDate': _nvd_timestamp(end),
            'resultsPerPage': str(self.config.nvd_results_per_page),
        }
        headers = {'User-Agent': USER_AGENT}
        if self.config.nvd_api_key:
            headers['apiKey'] = self.config.nvd_api_key

        timeout = ClientTimeout(total=self.config.nvd_timeout, connect=10)

        try:
            logging.info(f"Fetching CVEs published in the last {days} days from NVD...")

            async with self.session.get(self.config.nvd_base_url, params=params,
                                        headers=headers, timeout=timeout) as response:
                logging.debug(f"NVD API response status: {response.status}")

                if response.status != 200:
                    error_text = await response.text()
                    logging.error(f"NVD API error {response.status}: {error_text[:200]}")
                    raise FeedUnavailable(f"NVD returned status {response.status}",
                                          status=response.status)

                data = await response.json(content_type=None)

        except asyncio.TimeoutError as e:
            logging.error("Timeout fetching CVEs from NVD")
            raise FeedUnavailable("NVD request timed out", cause=e) from e
        except ClientError as e:
            logging.error(f"Network error fetching CVEs from NVD: {e}")
            raise FeedUnavailable("NVD request failed", cause=e) from e
        except ValueError as e:
            logging.error(f"Undecodable NVD response: {e}")
            raise FeedUnavailable("NVD response was not valid JSON", cause=e) from e

        if not isinstance(data, dict):
            raise FeedUnavailable("NVD response was not a JSON object")

        records = []
        for entry in data.get('vulnerabilities') or []:
            cve_data = entry.get('cve') if isinstance(entry, dict) else None
            if not isinstance(cve_data, dict) or not cve_data.get('id'):
                continue
            records.append(parse_vulnerability(cve_data))

        logging.info(f"NVD returned {len(records)} CVEs")
        return records
