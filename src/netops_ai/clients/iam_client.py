"""IBM Cloud IAM token exchange with a per-key token cache"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict

from aiohttp import ClientError, ClientSession, ClientTimeout

from ..config.settings import AICoreConfig
from ..core.errors import TokenExchangeFailed


GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"
EXPIRY_MARGIN = 60


@dataclass
class TokenEntry:
    token: str
    expiry: float

    def valid(self, now: float) -> bool:
        return now < self.expiry


class TokenCache:
    """Bearer tokens keyed by API key

    One lock guards the whole cache, including the exchange request, so two
    callers with the same key never exchange it twice.
    """

    def __init__(self, session: ClientSession, config: AICoreConfig,
                 clock: Callable[[], float] = time.monotonic):
        self.session = session
        self.config = config
        self._clock = clock
        self._entries: Dict[str, TokenEntry] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def token_for(self, api_key: str) -> str:
        async with self._lock:
            entry = self._entries.get(api_key)
            if entry and entry.valid(self._clock()):
                return entry.token

            token, expires_in = await self._exchange(api_key)
            self._entries[api_key] = TokenEntry(
                token=token,
                expiry=self._clock() + expires_in - EXPIRY_MARGIN,
            )
            return token

    async def _exchange(self, api_key: str):
        data = {'grant_type': GRANT_TYPE, 'apikey': api_key}
        headers = {
            'Content-Type': 'application/x-www-form-urlencoded',
            'Accept': 'application/json',
        }
        timeout = ClientTimeout(total=self.config.iam_timeout)

        try:
            logging.debug("Fetching IAM token")
            async with self.session.post(self.config.iam_token_url, data=data,
                                         headers=headers, timeout=timeout) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logging.error(f"IAM auth failed {response.status}: {error_text[:200]}")
                    raise TokenExchangeFailed(f"IAM auth failed with status {response.status}",
                                              status=response.status)
                body = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise TokenExchangeFailed("IAM request timed out", cause=e) from e
        except ClientError as e:
            raise TokenExchangeFailed("IAM request failed", cause=e) from e
        except ValueError as e:
            raise TokenExchangeFailed("failed to decode IAM response", cause=e) from e

        if not isinstance(body, dict):
            raise TokenExchangeFailed("failed to decode IAM response")

        token = body.get('access_token')
        if not isinstance(token, str) or not token:
            raise TokenExchangeFailed("IAM response carried no access_token")

        if body.get('expires_in') is None:
            raise TokenExchangeFailed("IAM response carried no expires_in")
        try:
            expires_in = int(body['expires_in'])
        except (TypeError, ValueError) as e:
            raise TokenExchangeFailed("IAM response carried an invalid expires_in", cause=e) from e

        return token, expires_in
