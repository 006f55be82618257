# tests/test_chain.py
from collections import Counter

import pytest

from mpdshuffle.core.settings import ConfigError
from mpdshuffle.shuffle.chain import EmptyChainError, ShuffleChain, fisher_yates

SAMPLE_URIS = [f"music/track{i:02d}.flac" for i in range(20)]


def filled(window_size, uris=SAMPLE_URIS, **kw):
    chain = ShuffleChain(window_size, rng_seed=kw.pop("rng_seed", 1), **kw)
    for uri in uris:
        chain.add(uri)
    return chain


def test_fisher_yates_preserves_items():
    import random

    a = list(range(100))
    out = fisher_yates(a, random.Random(3))
    assert sorted(out) == a
    assert a == list(range(100))  # input untouched


def test_items_and_len_reflect_every_add():
    chain = filled(3)
    assert len(chain) == len(SAMPLE_URIS)
    assert sorted(chain.items()) == sorted(SAMPLE_URIS)
    # 20 items in windows of 3 -> 7 pools, the last one partial
    assert chain.pool_count == 7


def test_duplicates_are_kept():
    chain = filled(2, ["a", "b", "a", "a"])
    assert Counter(chain.items()) == Counter({"a": 3, "b": 1})


def test_single_pool_never_repeats_within_a_pass():
    uris = SAMPLE_URIS[:7]
    for seed in range(25):
        chain = filled(7, uris, rng_seed=seed)
        picks = [chain.pick() for _ in range(7)]
        assert sorted(picks) == sorted(uris)


def test_single_pool_passes_do_not_repeat_at_the_seam():
    uris = SAMPLE_URIS[:5]
    for seed in range(25):
        chain = filled(5, uris, rng_seed=seed)
        picks = [chain.pick() for _ in range(50)]
        for a, b in zip(picks, picks[1:]):
            assert a != b
        # every pass of 5 is a full permutation
        for i in range(0, 50, 5):
            assert sorted(picks[i:i + 5]) == sorted(uris)


def test_every_item_gets_played():
    chain = filled(4)
    picks = [chain.pick() for _ in range(2000)]
    assert set(picks) == set(SAMPLE_URIS)


def test_seed_makes_picks_deterministic():
    a = filled(4, rng_seed=99)
    b = filled(4, rng_seed=99)
    assert [a.pick() for _ in range(30)] == [b.pick() for _ in range(30)]


def test_single_item_chain():
    chain = filled(3, ["only"])
    assert [chain.pick() for _ in range(3)] == ["only"] * 3


def test_add_between_picks_joins_current_pass():
    chain = ShuffleChain(4, rng_seed=5)
    chain.add("a")
    chain.add("b")
    first = chain.pick()
    chain.add("c")
    rest = [chain.pick(), chain.pick()]
    assert sorted([first] + rest) == ["a", "b", "c"]


def test_add_after_pass_used_up_starts_a_fresh_pass():
    for seed in range(40):
        chain = ShuffleChain(4, rng_seed=seed)
        for uri in ["a", "b", "c"]:
            chain.add(uri)
        first = [chain.pick() for _ in range(3)]
        chain.add("d")
        second = [chain.pick() for _ in range(4)]
        assert sorted(second) == ["a", "b", "c", "d"]
        assert first[-1] != second[0]


def test_weighted_picks_cover_all_pools():
    # one full pool of 10 and a trailing pool of 1
    chain = filled(10, SAMPLE_URIS[:11], weighted=True, rng_seed=7)
    counts = Counter(chain.pick() for _ in range(1100))
    # proportional to size: the lone trailing item shouldn't dominate
    assert counts[SAMPLE_URIS[10]] < 300
    assert set(counts) == set(SAMPLE_URIS[:11])


def test_uniform_pool_choice_favours_small_pools():
    chain = filled(10, SAMPLE_URIS[:11], rng_seed=7)
    counts = Counter(chain.pick() for _ in range(1100))
    assert counts[SAMPLE_URIS[10]] > 400


def test_pick_on_empty_chain_is_an_error():
    with pytest.raises(EmptyChainError):
        ShuffleChain().pick()
    assert issubclass(EmptyChainError, IndexError)


def test_clear_empties_chain():
    chain = filled(3)
    chain.clear()
    assert len(chain) == 0
    assert chain.items() == []
    with pytest.raises(EmptyChainError):
        chain.pick()


@pytest.mark.parametrize("size", [0, -1, 2.5, "7", True, False])
def test_invalid_window_size(size):
    with pytest.raises(ConfigError):
        ShuffleChain(size)
