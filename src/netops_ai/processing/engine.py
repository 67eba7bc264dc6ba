"""NetOps AI engine: owns the HTTP session and wires the services together"""

import logging
from typing import Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout

from ..cache.cve_store import VulnerabilityStore
from ..cache.refresher import CacheRefresher
from ..clients.credentials import CredentialRotator
from ..clients.iam_client import TokenCache
from ..clients.nvd_client import USER_AGENT, NVDClient
from ..clients.watsonx_client import WatsonxClient
from ..config.settings import AICoreConfig
from ..core.models import Event, Verdict
from .dispatcher import Dispatcher


class AICoreEngine:
    """Async context manager holding every long-lived service object

    Usage:
        async with AICoreEngine(config) as engine:
            await engine.store.ensure_fresh()
            verdict = await engine.dispatch(event)
    """

    def __init__(self, config: AICoreConfig):
        self.config = config
        self.session: Optional[ClientSession] = None
        self.nvd_client: Optional[NVDClient] = None
        self.store: Optional[VulnerabilityStore] = None
        self.rotator: Optional[CredentialRotator] = None
        self.tokens: Optional[TokenCache] = None
        self.ai_client: Optional[WatsonxClient] = None
        self.dispatcher: Optional[Dispatcher] = None

    async def __aenter__(self):
        """Async context manager entry"""
        timeout = ClientTimeout(
            total=60,
            connect=10,
            sock_read=30
        )

        connector = aiohttp.TCPConnector(
            limit=20,
            limit_per_host=10,
            ttl_dns_cache=300,
            use_dns_cache=True,
        )

        self.session = ClientSession(
            timeout=timeout,
            connector=connector,
            headers={'User-Agent': USER_AGENT}
        )

        self.nvd_client = NVDClient(self.session, self.config)
        self.store = VulnerabilityStore(self.nvd_client, self.config)
        missing = self.config.missing_watsonx_settings()
        self.rotator = CredentialRotator(self.config.watsonx_api_keys)
        self.tokens = TokenCache(self.session, self.config)
        self.ai_client = WatsonxClient(self.session, self.config, self.rotator,
                                       self.tokens, store=self.store)
        self.dispatcher = Dispatcher(self.ai_client, self.store,
                                     credentials_configured=not missing)

        if missing:
            logging.warning(f"watsonx client not available: {', '.join(missing)} not set. "
                            "AI Core will run in degraded mode.")
        logging.info("AI Core engine initialized")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        if self.session:
            await self.session.close()
            logging.info("AI Core engine closed")

    def refresher(self) -> CacheRefresher:
        return CacheRefresher(self.store, self.config.refresh_interval)

    async def dispatch(self, event: Event) -> Verdict:
        return await self.dispatcher.dispatch(event)
