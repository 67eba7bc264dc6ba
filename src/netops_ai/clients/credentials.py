"""Round-robin rotation over the configured watsonx API keys"""

import logging
import threading
from typing import List, Optional

from ..core.errors import NoCredentialsConfigured


def parse_keys(raw: Optional[str]) -> List[str]:
    """Split a comma separated key list, dropping blanks"""
    if not raw:
        return []
    return [key.strip() for key in raw.split(',') if key.strip()]


class CredentialRotator:
    """Hands out API keys in a fixed cyclic order

    The pool is parsed on first use so a process without keys can still start
    and report degraded verdicts.
    """

    def __init__(self, raw_keys: Optional[str], start: int = 0):
        self._raw_keys = raw_keys
        self._keys: Optional[List[str]] = None
        self._start = start
        self._index = 0
        self._lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return bool(parse_keys(self._raw_keys))

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys) if self._keys is not None else len(parse_keys(self._raw_keys))

    def next(self) -> str:
        """Return the key at the cursor and advance the cursor"""
        with self._lock:
            if not self._keys:
                keys = parse_keys(self._raw_keys)
                if not keys:
                    raise NoCredentialsConfigured("WATSONX_API_KEYS not set")
                self._keys = keys
                self._index = self._start % len(keys)
                logging.debug(f"Loaded {len(keys)} watsonx API key(s) for rotation")

            key = self._keys[self._index]
            self._index = (self._index + 1) % len(self._keys)
            return key
