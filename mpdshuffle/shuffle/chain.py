# mpdshuffle/shuffle/chain.py
"""
Shuffle chain: anti-repeat random picker over song URIs.

Design notes:
- Items are split, in insertion order, into pools of at most `window_size`.
- Each pool walks through its own random permutation; an item comes back only
  after every other item in its pool has been picked once (repeat latency is
  bounded by window_size).
- When a pool runs dry it is re-permuted straight away and stays eligible.
  The new pass never opens with the item that closed the previous one.
- Pool choice is uniform by default; weighted=True weights pools by size, so
  a short trailing pool isn't over-played.
- Plain lists + index pointers; pick() is O(1) apart from the O(window_size)
  refill once per pass.
"""

from typing import List, Optional
import random

from mpdshuffle.core.settings import ConfigError


class EmptyChainError(IndexError):
    """pick() was called before anything was added to the chain."""


def fisher_yates(arr: List, rng: random.Random) -> List:
    """Classic Fisher-Yates, returns a new list copy."""
    a = list(arr)
    for i in range(len(a) - 1, 0, -1):
        j = rng.randint(0, i)
        a[i], a[j] = a[j], a[i]
    return a


class _Pool:
    __slots__ = ("members", "order", "pos")

    def __init__(self):
        self.members: List[str] = []
        # permutation of member indexes; None until the first pick
        self.order: Optional[List[int]] = None
        self.pos = 0

    def add(self, item: str, rng: random.Random) -> None:
        self.members.append(item)
        if self.order is not None and self.pos >= len(self.order):
            # pass already used up: start the next one with the new item in it
            self._refill(rng)
        elif self.order is not None:
            # land somewhere in the unconsumed part of the current pass
            self.order.insert(rng.randint(self.pos, len(self.order)), len(self.members) - 1)

    def next(self, rng: random.Random) -> str:
        if self.order is None:
            self.order = fisher_yates(range(len(self.members)), rng)
            self.pos = 0
        elif self.pos >= len(self.order):
            self._refill(rng)
        item = self.members[self.order[self.pos]]
        self.pos += 1
        return item

    def _refill(self, rng: random.Random) -> None:
        last = self.members[self.order[-1]]
        order = fisher_yates(range(len(self.members)), rng)
        if self.members[order[0]] == last:
            swaps = [j for j in range(1, len(order)) if self.members[order[j]] != last]
            if swaps:
                j = rng.choice(swaps)
                order[0], order[j] = order[j], order[0]
        self.order = order
        self.pos = 0


class ShuffleChain:
    def __init__(self, window_size: int = 7, *, weighted: bool = False, rng_seed: Optional[int] = None):
        """
        window_size: pool capacity, also the worst-case repeat distance within a pool
        weighted: pick pools proportionally to their size instead of uniformly
        rng_seed: optional seed for deterministic behavior (for tests)
        """
        if isinstance(window_size, bool) or not isinstance(window_size, int) or window_size < 1:
            raise ConfigError(f"window size must be an integer >= 1, got {window_size!r}")
        self.window_size = window_size
        self.weighted = bool(weighted)
        self._rng = random.Random(rng_seed)
        self._pools: List[_Pool] = []
        self._count = 0

    # -----------------------
    # loading
    # -----------------------
    def add(self, item: str) -> None:
        if not self._pools or len(self._pools[-1].members) >= self.window_size:
            self._pools.append(_Pool())
        self._pools[-1].add(item, self._rng)
        self._count += 1

    def clear(self) -> None:
        self._pools = []
        self._count = 0

    # -----------------------
    # picking
    # -----------------------
    def pick(self) -> str:
        if not self._pools:
            raise EmptyChainError("pick() called on an empty shuffle chain")

        if self.weighted:
            # every pool but the last is full, so an item index maps straight to its pool
            pool = self._pools[self._rng.randrange(self._count) // self.window_size]
        else:
            pool = self._pools[self._rng.randrange(len(self._pools))]
        return pool.next(self._rng)

    # -----------------------
    # introspection
    # -----------------------
    def __len__(self) -> int:
        return self._count

    def items(self) -> List[str]:
        """All stored URIs (duplicates included) in insertion order."""
        return [item for pool in self._pools for item in pool.members]

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def __repr__(self):
        return f"ShuffleChain(items={self._count}, pools={len(self._pools)}, window_size={self.window_size})"
