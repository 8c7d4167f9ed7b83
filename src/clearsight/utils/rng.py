"""
rng.py
------

Random number utilities for clearsight.

This module standardizes RNG handling across the package. Gap directions are
drawn through small callable "direction sources" so the staircase never
touches ambient randomness and tests can replay a fixed sequence.

Provides:
- seed / split : wrappers around JAX PRNG keys.
- KeyDirectionSource : uniform GapDirection draws from a JAX key.
- ScriptedDirectionSource : replays a fixed sequence of directions.

Examples
--------
>>> from clearsight.utils.rng import KeyDirectionSource, seed
>>> directions = KeyDirectionSource(seed(0))
>>> gap = directions()
"""

from __future__ import annotations

from collections.abc import Iterable

import jax
import jax.random as jr

from clearsight.data.dataset import GapDirection

_DIRECTIONS = tuple(GapDirection)


def seed(seed_value: int) -> jax.Array:
    """
    Create a new PRNG key from an integer seed.

    Parameters
    ----------
    seed_value : int
        Seed for random number generation.

    Returns
    -------
    jax.Array
        New PRNG key.
    """
    return jr.PRNGKey(seed_value)


def split(key: jax.Array, num: int = 2):
    """
    Split a PRNG key into multiple independent keys.

    Parameters
    ----------
    key : jax.Array
        RNG key to split.
    num : int, default=2
        Number of new keys to return.

    Returns
    -------
    tuple of jax.Array
        Independent new PRNG keys.
    """
    return jr.split(key, num=num)


class KeyDirectionSource:
    """
    Uniform gap-direction source backed by a JAX PRNG key.

    Each call splits the internal key and draws one of the four directions
    with equal probability.

    Parameters
    ----------
    key : jax.Array
        Initial PRNG key (see :func:`seed`).
    """

    def __init__(self, key: jax.Array):
        self._key = key

    def __call__(self) -> GapDirection:
        self._key, subkey = split(self._key)
        idx = int(jr.randint(subkey, (), 0, len(_DIRECTIONS)))
        return _DIRECTIONS[idx]


class ScriptedDirectionSource:
    """
    Direction source that replays a fixed sequence.

    Useful in tests and for replaying a recorded session.

    Parameters
    ----------
    directions : Iterable[GapDirection]
        Directions returned in order, one per call.

    Raises
    ------
    IndexError
        When called more times than there are scripted directions.
    """

    def __init__(self, directions: Iterable[GapDirection]):
        self.directions = list(directions)
        self.position = 0

    def __call__(self) -> GapDirection:
        if self.position >= len(self.directions):
            raise IndexError(
                f"scripted direction source exhausted after {len(self.directions)} draws"
            )
        gap = self.directions[self.position]
        self.position += 1
        return gap

    @property
    def remaining(self) -> int:
        return len(self.directions) - self.position
