"""
test_rng.py
-----------

Tests for gap-direction sources.
"""

import pytest

from clearsight.data.dataset import GapDirection
from clearsight.utils.rng import KeyDirectionSource, ScriptedDirectionSource, seed


def test_key_source_is_reproducible():
    a = KeyDirectionSource(seed(42))
    b = KeyDirectionSource(seed(42))
    assert [a() for _ in range(15)] == [b() for _ in range(15)]


def test_key_source_covers_all_directions():
    source = KeyDirectionSource(seed(0))
    draws = [source() for _ in range(200)]
    assert set(draws) == set(GapDirection)


def test_scripted_source_replays_then_exhausts():
    source = ScriptedDirectionSource([GapDirection.LEFT, GapDirection.DOWN])
    assert source() is GapDirection.LEFT
    assert source.remaining == 1
    assert source() is GapDirection.DOWN
    with pytest.raises(IndexError):
        source()
