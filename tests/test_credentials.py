"""Tests for API key rotation"""

from collections import Counter
from concurrent.futures import ThreadPoolExecutor

import pytest

from netops_ai.clients.credentials import CredentialRotator, parse_keys
from netops_ai.core.errors import NoCredentialsConfigured


@pytest.mark.parametrize('pool_size', [1, 2, 3, 5])
def test_round_robin_wraps(pool_size):
    keys = [f"key-{i}" for i in range(pool_size)]
    rotator = CredentialRotator(",".join(keys))

    dispensed = [rotator.next() for _ in range(pool_size + 1)]

    assert set(dispensed) == set(keys)
    assert dispensed[:pool_size] == keys
    assert dispensed[pool_size] == dispensed[0]


def test_starting_cursor():
    rotator = CredentialRotator("a,b,c", start=1)
    assert [rotator.next() for _ in range(4)] == ["b", "c", "a", "b"]


def test_blank_entries_and_whitespace_are_dropped():
    assert parse_keys(" a , ,b,, ") == ["a", "b"]
    rotator = CredentialRotator(" a , ,b,, ")
    assert [rotator.next() for _ in range(3)] == ["a", "b", "a"]


@pytest.mark.parametrize('raw', [None, "", " , ,"])
def test_missing_keys_fail_on_first_use(raw):
    rotator = CredentialRotator(raw)

    assert not rotator.configured
    with pytest.raises(NoCredentialsConfigured):
        rotator.next()


def test_concurrent_callers_share_the_cursor():
    rotator = CredentialRotator("a,b,c,d")

    with ThreadPoolExecutor(max_workers=8) as pool:
        dispensed = list(pool.map(lambda _: rotator.next(), range(400)))

    assert Counter(dispensed) == {"a": 100, "b": 100, "c": 100, "d": 100}
