"""Shared fixtures: fake remote services and configuration"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import ClientSession, web
from aiohttp.test_utils import TestServer

from netops_ai.config.settings import AICoreConfig
from netops_ai.core.models import VulnerabilityRecord


VERDICT_TEXT = '{"severity": "high", "explanation": "Link down on core router", "recommended_action": "Check the interface"}'


class FakeServices:
    """NVD, IAM and watsonx stand-ins served by one local aiohttp app

    Tests set the ``*_status`` and ``*_body`` attributes to shape responses
    and read ``hits`` / ``requests`` to see what the client sent.
    """

    def __init__(self):
        self.hits = {'nvd': 0, 'iam': 0, 'generation': 0}
        self.requests: Dict[str, List[Dict[str, Any]]] = {'nvd': [], 'iam': [], 'generation': []}

        self.nvd_status = 200
        self.nvd_body: Any = {'vulnerabilities': []}
        self.iam_status = 200
        self.iam_body: Any = {'access_token': 'token-1', 'expires_in': 3600}
        self.generation_status = 200
        self.generation_body: Any = {'results': [{'generated_text': VERDICT_TEXT}]}

        self.server: Optional[TestServer] = None

    @staticmethod
    def _respond(status: int, body: Any) -> web.Response:
        if isinstance(body, str):
            return web.Response(status=status, text=body, content_type='application/json')
        return web.json_response(body, status=status)

    async def nvd(self, request: web.Request) -> web.Response:
        self.hits['nvd'] += 1
        self.requests['nvd'].append({'query': dict(request.query), 'headers': dict(request.headers)})
        return self._respond(self.nvd_status, self.nvd_body)

    async def iam(self, request: web.Request) -> web.Response:
        self.hits['iam'] += 1
        form = await request.post()
        self.requests['iam'].append({'form': dict(form), 'headers': dict(request.headers)})
        return self._respond(self.iam_status, self.iam_body)

    async def generation(self, request: web.Request) -> web.Response:
        self.hits['generation'] += 1
        payload = await request.json()
        self.requests['generation'].append({
            'json': payload,
            'query': dict(request.query),
            'headers': dict(request.headers),
        })
        return self._respond(self.generation_status, self.generation_body)

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get('/rest/json/cves/2.0', self.nvd)
        app.router.add_post('/identity/token', self.iam)
        app.router.add_post('/ml/v1/text/generation', self.generation)
        return app

    def url(self, path: str = '') -> str:
        return str(self.server.make_url(path))


class FakeClock:
    def __init__(self, value):
        self.value = value

    def __call__(self):
        return self.value

    def advance(self, delta):
        self.value = self.value + delta


class FakeFeed:
    def __init__(self, records=None, error: Optional[Exception] = None):
        self.records = list(records or [])
        self.error = error
        self.calls = 0
        self.days = None

    async def fetch_recent(self, days: int):
        self.calls += 1
        self.days = days
        if self.error:
            raise self.error
        return list(self.records)


def make_nvd_entry(cve_id: str, vendor: Optional[str] = None, product: Optional[str] = None,
                   score: Optional[float] = None, published: str = "2024-01-10T15:15:08.337",
                   description: str = "Test vulnerability", metric: str = 'cvssMetricV31') -> Dict:
    cve: Dict[str, Any] = {
        'id': cve_id,
        'published': published,
        'descriptions': [
            {'lang': 'es', 'value': 'Vulnerabilidad de prueba'},
            {'lang': 'en', 'value': description},
        ],
        'metrics': {},
    }
    if score is not None:
        cve['metrics'][metric] = [{'source': 'nvd@nist.gov', 'cvssData': {'baseScore': score}}]
    if vendor:
        cve['configurations'] = [{
            'nodes': [{
                'operator': 'OR',
                'negate': False,
                'cpeMatch': [{
                    'vulnerable': True,
                    'criteria': f'cpe:2.3:o:{vendor}:{product}:*:*:*:*:*:*:*:*',
                    'matchCriteriaId': '5E1D3D1E-1111-2222-3333-444455556666',
                }],
            }],
        }]
    return {'cve': cve}


@pytest.fixture
def nvd_entry():
    return make_nvd_entry


@pytest.fixture
def fake_feed():
    return FakeFeed


@pytest.fixture
def utc_clock():
    return FakeClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def records():
    """One Cisco record and three non-Cisco records"""
    return [
        VulnerabilityRecord("CVE-2024-20001", "ASA crash", "2024-01-10T10:00:00.000",
                            9.8, "cisco", "adaptive_security_appliance_software"),
        VulnerabilityRecord("CVE-2024-30002", "Junos flaw", "2024-01-11T10:00:00.000",
                            8.1, "juniper", "junos"),
        VulnerabilityRecord("CVE-2024-40003", "FortiOS flaw", "2024-01-12T10:00:00.000",
                            7.5, "fortinet", "fortios"),
        VulnerabilityRecord("CVE-2024-50004", "RouterOS flaw", "2024-01-09T10:00:00.000",
                            0.0, "mikrotik", "routeros"),
    ]


@pytest.fixture
def config(tmp_path):
    return AICoreConfig(
        cve_cache_file=str(tmp_path / "cve_cache.json"),
        watsonx_api_keys="key-a,key-b",
        watsonx_project_id="project-123",
    )


@pytest_asyncio.fixture
async def services():
    fake = FakeServices()
    server = TestServer(fake.app())
    await server.start_server()
    fake.server = server
    yield fake
    await server.close()


@pytest.fixture
def service_config(config, services):
    """Configuration pointing every remote endpoint at the fake services"""
    config.nvd_base_url = services.url('/rest/json/cves/2.0')
    config.iam_token_url = services.url('/identity/token')
    config.watsonx_url = services.url('')
    return config


@pytest_asyncio.fixture
async def session():
    async with ClientSession() as client_session:
        yield client_session


def write_cache_file(path, timestamp: datetime, records: List[VulnerabilityRecord]):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump({
            'timestamp': timestamp.isoformat(),
            'cves': [record.to_dict() for record in records],
        }, f)


@pytest.fixture
def cache_writer():
    return write_cache_file


@pytest.fixture
def stale_by():
    """Offset that takes a timestamp just past the default freshness window"""
    return timedelta(seconds=901)
