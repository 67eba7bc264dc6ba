"""Event dispatcher: relevant CVEs -> AI client -> verdict"""

import logging
from typing import Dict, Optional, Protocol, Sequence

from ..cache.cve_store import VulnerabilityStore
from ..core.errors import AICoreError
from ..core.models import Event, Verdict, VulnerabilityRecord
from ..retrieval.matcher import find_relevant


CHECK_LOGS = "Check logs"


class EventAnalyzer(Protocol):
    async def analyze(self, event: Event,
                      records: Optional[Sequence[VulnerabilityRecord]] = None) -> Verdict:
        ...


class Dispatcher:
    """Single place where lower-layer failures become degraded verdicts"""

    def __init__(self, analyzer: EventAnalyzer, store: VulnerabilityStore,
                 credentials_configured: bool = True):
        self.analyzer = analyzer
        self.store = store
        self.credentials_configured = credentials_configured

    async def dispatch(self, event: Event) -> Verdict:
        logging.info(f"Dispatching event type={event.type} to watsonx")

        try:
            records = find_relevant(self.store.snapshot(), event.message)
            logging.debug(f"{len(records)} relevant CVEs for event type={event.type}")
            verdict = await self.analyzer.analyze(event, records)
        except AICoreError as e:
            logging.error(f"AI processing failed for event type={event.type} "
                          f"source={event.source_host}: {e}")
            return Verdict.degraded(f"AI processing failed: {e}", CHECK_LOGS)
        except Exception as e:
            logging.exception(f"Unexpected error processing event type={event.type}")
            return Verdict.degraded(f"AI processing failed: {e}", CHECK_LOGS)

        logging.info(f"AI processing successful: severity={verdict.severity}")
        return verdict

    def health(self) -> Dict:
        return {
            'status': 'healthy' if self.credentials_configured else 'degraded',
            'service': 'ai-core',
            'watson': self.credentials_configured,
            'cves': len(self.store.snapshot()),
        }
