# mpdshuffle/shuffle/rules.py
"""
Exclusion rules.

A Rule is a conjunction of (tag, pattern) pairs: it rejects a song only when
*every* pair matches the song's tag value exactly. A rule set is a list of
rules, and a song gets into the chain only if no rule in the set rejects it.

    rule = Rule()
    rule.add_pattern("artist", "Nickelback")
    rule.add_pattern("album", "Silver Side Up")   # only that album is excluded
"""

from typing import Iterable, List, Sequence, Tuple, Union

from mpdshuffle.core.settings import ConfigError
from mpdshuffle.shuffle.models import Song, Tag


class Rule:
    def __init__(self):
        self._patterns: List[Tuple[Tag, str]] = []

    def add_pattern(self, tag: Union[Tag, str], pattern: str) -> None:
        """Add an exclusion pattern. Raises ConfigError for unknown tag names."""
        self._patterns.append((Tag.parse(tag), pattern))

    @property
    def patterns(self) -> List[Tuple[Tag, str]]:
        return list(self._patterns)

    def accepts(self, song: Song) -> bool:
        """False exactly when every pattern of this rule matches the song."""
        if not self._patterns:
            return True
        for tag, pattern in self._patterns:
            value = song.tag(tag)
            if value is None or value != pattern:
                return True
        return False

    def __repr__(self):
        inner = ", ".join(f"{t.value}={p!r}" for t, p in self._patterns)
        return f"Rule({inner})"


def ruleset_accepts(rules: Iterable[Rule], song: Song) -> bool:
    return all(rule.accepts(song) for rule in rules)


def rules_from_args(values: Sequence[str]) -> Rule:
    """
    Build one Rule from a flat [tag, value, tag, value, ...] list,
    the shape argparse hands us for a single --exclude.
    """
    if not values or len(values) % 2 != 0:
        raise ConfigError(
            f"--exclude takes TAG VALUE pairs, got {len(values)} argument(s): {' '.join(values)}"
        )
    rule = Rule()
    for i in range(0, len(values), 2):
        rule.add_pattern(values[i], values[i + 1])
    return rule
