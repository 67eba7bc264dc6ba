"""Tests for the dispatcher failure boundary"""

import pytest

from netops_ai.cache.cve_store import VulnerabilityStore
from netops_ai.core.errors import (
    EmptyModelOutput,
    FeedUnavailable,
    ModelUnavailable,
    NoCredentialsConfigured,
    TokenExchangeFailed,
)
from netops_ai.core.models import Event, Verdict
from netops_ai.processing.dispatcher import CHECK_LOGS, Dispatcher


class StubAnalyzer:
    def __init__(self, verdict=None, error=None):
        self.verdict = verdict or Verdict("high", "x", "y")
        self.error = error
        self.seen = []

    async def analyze(self, event, records=None):
        self.seen.append((event, list(records or [])))
        if self.error:
            raise self.error
        return self.verdict


@pytest.fixture
def event():
    return Event(type="syslog", message="Interface on router-01 (Cisco) down", source_host="router-01")


@pytest.mark.asyncio
async def test_passes_relevant_records_to_analyzer(config, fake_feed, utc_clock, records, event):
    store = VulnerabilityStore(fake_feed(records), config, now=utc_clock)
    await store.ensure_fresh()
    analyzer = StubAnalyzer()

    verdict = await Dispatcher(analyzer, store).dispatch(event)

    assert verdict == Verdict("high", "x", "y")
    _, passed = analyzer.seen[0]
    assert [record.cve_id for record in passed] == ["CVE-2024-20001"]


@pytest.mark.asyncio
@pytest.mark.parametrize('error', [
    NoCredentialsConfigured("WATSONX_API_KEYS not set"),
    TokenExchangeFailed("IAM auth failed with status 400", status=400),
    ModelUnavailable("watsonx returned status 500", status=500),
    EmptyModelOutput("empty response from watsonx"),
    RuntimeError("boom"),
])
async def test_failures_become_degraded_verdicts(config, fake_feed, event, error):
    store = VulnerabilityStore(fake_feed(), config)

    verdict = await Dispatcher(StubAnalyzer(error=error), store).dispatch(event)

    assert verdict.severity == "unknown"
    assert verdict.explanation == f"AI processing failed: {error}"
    assert verdict.recommended_action == CHECK_LOGS


@pytest.mark.asyncio
async def test_feed_failure_without_snapshot(config, fake_feed, utc_clock, event):
    store = VulnerabilityStore(fake_feed(error=FeedUnavailable("NVD down")), config, now=utc_clock)
    with pytest.raises(FeedUnavailable):
        await store.ensure_fresh()

    analyzer = StubAnalyzer(error=ModelUnavailable("watsonx request failed"))
    verdict = await Dispatcher(analyzer, store).dispatch(event)

    assert store.snapshot() == []
    assert analyzer.seen[0][1] == []
    assert verdict.severity == "unknown"
    assert verdict.recommended_action == CHECK_LOGS


@pytest.mark.asyncio
async def test_degraded_model_output_passes_through(config, fake_feed, event):
    degraded = Verdict.degraded("I cannot determine this.", "Manual review required")
    store = VulnerabilityStore(fake_feed(), config)

    assert await Dispatcher(StubAnalyzer(verdict=degraded), store).dispatch(event) == degraded


@pytest.mark.asyncio
async def test_health(config, fake_feed, utc_clock, records):
    store = VulnerabilityStore(fake_feed(records), config, now=utc_clock)
    await store.ensure_fresh()

    assert Dispatcher(StubAnalyzer(), store).health() == {
        'status': 'healthy',
        'service': 'ai-core',
        'watson': True,
        'cves': 3,
    }
    assert Dispatcher(StubAnalyzer(), store, credentials_configured=False).health()['status'] == 'degraded'
