"""watsonx.ai text generation client"""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from ..analysis.parser import parse_verdict
from ..analysis.prompt import STOP_SEQUENCES, build_prompt
from ..cache.cve_store import VulnerabilityStore
from ..config.settings import AICoreConfig
from ..core.errors import EmptyModelOutput, MissingConfiguration, ModelUnavailable
from ..core.models import Event, Verdict, VulnerabilityRecord
from ..retrieval.context import render_context
from ..retrieval.matcher import find_relevant
from .credentials import CredentialRotator
from .iam_client import TokenCache


class WatsonxClient:
    """Retrieval-augmented severity analysis through watsonx.ai"""

    def __init__(self, session: ClientSession, config: AICoreConfig,
                 rotator: CredentialRotator, tokens: TokenCache,
                 store: Optional[VulnerabilityStore] = None):
        self.session = session
        self.config = config
        self.rotator = rotator
        self.tokens = tokens
        self.store = store

    def relevant_records(self, event: Event) -> List[VulnerabilityRecord]:
        if self.store is None:
            return []
        return find_relevant(self.store.snapshot(), event.message)

    def build_payload(self, prompt: str) -> Dict:
        return {
            'model_id': self.config.watsonx_model_id,
            'project_id': self.config.watsonx_project_id,
            'input': prompt,
            'parameters': {
                'temperature': self.config.watsonx_temperature,
                'max_new_tokens': self.config.watsonx_max_new_tokens,
                'stop': list(STOP_SEQUENCES),
            },
        }

    async def analyze(self, event: Event,
                      records: Optional[Sequence[VulnerabilityRecord]] = None) -> Verdict:
        """Classify ``event``; transport and auth failures propagate"""
        if not self.config.watsonx_project_id:
            raise MissingConfiguration("WATSONX_PROJECT_ID not set")
        if not self.config.watsonx_region and not self.config.watsonx_url:
            raise MissingConfiguration("WATSONX_REGION not set")

        api_key = self.rotator.next()
        token = await self.tokens.token_for(api_key)

        if records is None:
            records = self.relevant_records(event)
        context_block = render_context(records)

        prompt = build_prompt(event, context_block)
        generated = await self.generate(prompt, token)
        return parse_verdict(generated)

    async def generate(self, prompt: str, token: str) -> str:
        """Single generation request; returns the first generated text"""
        headers = {
            'Authorization': f'Bearer {token}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        timeout = ClientTimeout(total=self.config.watsonx_timeout)

        try:
            logging.debug(f"Calling watsonx model: {self.config.watsonx_model_id}")
            async with self.session.post(self.config.generation_url,
                                         json=self.build_payload(prompt),
                                         headers=headers, timeout=timeout) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logging.error(f"watsonx failed {response.status}: {error_text[:200]}")
                    raise ModelUnavailable(f"watsonx returned status {response.status}",
                                           status=response.status)
                body = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise ModelUnavailable("watsonx request timed out", cause=e) from e
        except ClientError as e:
            raise ModelUnavailable("watsonx request failed", cause=e) from e
        except ValueError as e:
            raise ModelUnavailable("failed to decode watsonx response", cause=e) from e

        results = body.get('results') if isinstance(body, dict) else None
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            raise EmptyModelOutput("empty response from watsonx")

        text = results[0].get('generated_text')
        if not isinstance(text, str) or not text:
            raise EmptyModelOutput("watsonx returned no generated text")

        return text
