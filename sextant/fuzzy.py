"""
Sextant fuzzy matcher.

Used only on diagnostic paths: when the scanner reports an unknown option or a
missing argument, fuzzy_match() resolves the offending token to the most
plausible descriptor so the caller can say "did you mean --logging?".

Resolution order (first success wins)
1. the token minus one leading dash is a single character: exact short match;
2. exact long match on the raw token;
3. a dash followed by one character: exact short match on that character;
4. one dash followed by more than one character: exact long match on the rest;
5. two dashes: exact long match on the rest;
6. otherwise the Levenshtein distance between the token and every descriptor's
   names, each spelled as on a command line ("-l", "--logging"). The smallest
   distance wins; on ties the first descriptor in registry order wins, and a
   descriptor's short name is tried before its long name.

edit_distance() keeps a single rolling row sized by the shorter string.
"""
from enum import IntEnum
from typing import NamedTuple

from .utils import *


class MatchKind(IntEnum):
    NONE = 0
    SHORT = 1
    LONG = 2


class Match(NamedTuple):
    descriptor: object = None
    kind: MatchKind = MatchKind.NONE
    distance: int = -1

    def __bool__(self):
        return self.descriptor is not None


def edit_distance(a, b, /):
    """
    Levenshtein distance between two strings.

    Insertions, deletions and substitutions each cost one. Memory is
    O(min(len(a), len(b))). The result is symmetric and zero for equal strings.
    """
    if not isinstance(a, str) or not isinstance(b, str):
        raise TypeError("edit_distance() arguments must be strings")

    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i, left in enumerate(a, 1):
        diagonal, row[0] = row[0], i
        for j, right in enumerate(b, 1):
            diagonal, row[j] = row[j], min(
                row[j] + 1,  # deletion
                row[j - 1] + 1,  # insertion
                diagonal + (left != right),  # substitution
            )
    return row[-1]


def _exact(token, registry):
    stripped = token[1:] if token.startswith("-") else token
    if len(stripped) == 1 and (descriptor := registry.find_by_short(stripped)):
        return Match(descriptor, MatchKind.SHORT, 0)

    if descriptor := registry.find_by_long(token):
        return Match(descriptor, MatchKind.LONG, 0)

    if len(token) == 2 and token[0] == "-" and (descriptor := registry.find_by_short(token[1])):
        return Match(descriptor, MatchKind.SHORT, 0)

    if token.startswith("-") and not token.startswith("--") and len(token) > 2:
        if descriptor := registry.find_by_long(token[1:]):
            return Match(descriptor, MatchKind.LONG, 0)

    if token.startswith("--") and (descriptor := registry.find_by_long(token[2:])):
        return Match(descriptor, MatchKind.LONG, 0)

    return None


def fuzzy_match(token, registry, /):
    """
    Find the descriptor closest to `token` (as written, dashes included).

    Returns a Match(descriptor, kind, distance). Exact matches report distance 0.
    Match() (descriptor None, kind NONE) is returned for an empty token or when
    the registry has no named descriptor.
    """
    if not isinstance(token, str):
        raise TypeError("fuzzy_match() token must be a string")
    if not token:
        return Match()

    if match := _exact(token, registry):
        return match

    best = Match()
    for descriptor in registry:
        for kind, spelling in (
            (MatchKind.SHORT, dashed(short=descriptor.short)),
            (MatchKind.LONG, dashed(long=descriptor.long)),
        ):
            if not spelling:
                continue
            distance = edit_distance(token, spelling)
            if best.descriptor is None or distance < best.distance:
                best = Match(descriptor, kind, distance)
    return best


__all__ = (
    "MatchKind",
    "Match",
    "edit_distance",
    "fuzzy_match",
)
