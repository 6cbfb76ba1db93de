"""
Sextant tokenizing dispatcher.

parse() drives a Scanner over argv, turns every raw signal into an Event with
classify(), and hands each event to the caller's handler:

    handler(kind, descriptor, value, user) -> int | None

- kind: EventKind
- descriptor: the matched OptionDescriptor, the fuzzy suggestion for
  UNKNOWN_*/ARG_MISSING_* events, or None when nothing resembles the token
- value: the option argument / positional token, or None
- user: the opaque context given to parse(), passed through unmodified

A truthy (non-zero) handler result stops the scan at once and becomes the
result of parse(); remaining argv is not processed. Once the scanner is done,
arguments left after "--" are delivered in order as POSITIONAL events.

classify() is the single mapping from scanner signals to events:

    signal      event                           descriptor
    0           LONG                            registry lookup of the long entry
    1           POSITIONAL                      the positional collector
    '?'         UNKNOWN_NONE/SHORT/LONG         fuzzy match on the token
    ':'         ARG_MISSING_NONE/SHORT/LONG     fuzzy match on the token
    other       SHORT                           registry lookup of the character

A bare token is always POSITIONAL. Positional arguments with no positional
collector raise PositionalWithoutSlotError (the handler is not called). A long
entry or short character the registry cannot resolve is an engine bug and
raises InternalError.
"""
from contextlib import closing
from enum import IntEnum
from typing import NamedTuple

from rich.console import Console

from .compiler import compile
from .faults import *
from .fuzzy import MatchKind, fuzzy_match
from .scanner import LONG, NONOPTION, UNKNOWN, MISSING, Scanner, Signal

console = Console(stderr=True)


class EventKind(IntEnum):
    SHORT = 1
    LONG = 2
    POSITIONAL = 3
    UNKNOWN_NONE = 4
    UNKNOWN_SHORT = 5
    UNKNOWN_LONG = 6
    ARG_MISSING_NONE = 7
    ARG_MISSING_SHORT = 8
    ARG_MISSING_LONG = 9

    @property
    def matched(self):
        """
        True for events naming a descriptor the user actually typed.
        """
        return self in (EventKind.SHORT, EventKind.LONG, EventKind.POSITIONAL)

    @property
    def unknown(self):
        return self in (EventKind.UNKNOWN_NONE, EventKind.UNKNOWN_SHORT, EventKind.UNKNOWN_LONG)

    @property
    def missing(self):
        return self in (EventKind.ARG_MISSING_NONE, EventKind.ARG_MISSING_SHORT, EventKind.ARG_MISSING_LONG)


class Event(NamedTuple):
    kind: EventKind
    descriptor: object = None
    value: str | None = None
    token: str = ""


_UNKNOWN = {
    MatchKind.NONE: EventKind.UNKNOWN_NONE,
    MatchKind.SHORT: EventKind.UNKNOWN_SHORT,
    MatchKind.LONG: EventKind.UNKNOWN_LONG,
}

_MISSING = {
    MatchKind.NONE: EventKind.ARG_MISSING_NONE,
    MatchKind.SHORT: EventKind.ARG_MISSING_SHORT,
    MatchKind.LONG: EventKind.ARG_MISSING_LONG,
}


def _positional(registry, token):
    if (descriptor := registry.positional()) is None:
        trigger(PositionalWithoutSlotError(
            "positional argument %r found, but no positional option is declared" % token,
            hint="declare a positional option, or remove the positional arguments",
        ), settings=registry.settings, token=token)
    return descriptor


def classify(signal, registry, tables, /):
    """
    map one scanner Signal to an Event.

    raises
    - PositionalWithoutSlotError: a non-option token and no positional collector.
    - InternalError: the tables and the registry disagree, or a fuzzy result
      has no classification.
    """
    code = signal.code

    if code == LONG:
        try:
            name = tables.longopts[signal.index].name
        except IndexError:
            name = None
        if name is None or (descriptor := registry.find_by_long(name)) is None:
            trigger(InternalError(
                "long option #%d (%r) is in the long table but not in the registry" % (signal.index, name),
                hint="the option table changed after it was compiled",
            ), settings=registry.settings, signal=signal)
        return Event(EventKind.LONG, descriptor, signal.optarg, signal.token)

    if code == NONOPTION:
        return Event(EventKind.POSITIONAL, _positional(registry, signal.optarg), signal.optarg, signal.optarg)

    if code in (UNKNOWN, MISSING):
        match = fuzzy_match(signal.token, registry)
        try:
            kind = (_UNKNOWN if code == UNKNOWN else _MISSING)[match.kind]
        except KeyError:
            trigger(InternalError(
                "fuzzy match for %r has no classification (%r)" % (signal.token, match.kind),
            ), settings=registry.settings, signal=signal)
        return Event(kind, match.descriptor, signal.optarg, signal.token)

    if isinstance(code, str) and len(code) == 1:
        if (descriptor := registry.find_by_short(code)) is None:
            trigger(InternalError(
                "short option %r was matched by the scanner but is not in the registry" % code,
                hint="the option table changed after it was compiled",
            ), settings=registry.settings, signal=signal)
        return Event(EventKind.SHORT, descriptor, signal.optarg, signal.token)

    trigger(InternalError(
        "scanner returned an unknown signal %r" % (code,),
    ), settings=registry.settings, signal=signal)


def events(argv, registry, /, *, tables=None):
    """
    yield the classified Event stream for argv, in argv order.

    the registry is sealed while the generator is alive; close it (or exhaust
    it) to release the table. trailing arguments after "--" come last as
    POSITIONAL events; PositionalWithoutSlotError is raised before the first
    of them is yielded when no positional collector exists.
    """
    if tables is None or not tables.current(registry):
        tables = compile(registry)

    debug = registry.settings.debug

    with registry.sealed():
        scanner = Scanner(argv, tables)

        for signal in scanner:
            event = classify(signal, registry, tables)
            if event.kind.matched:
                event.descriptor.count += 1
            if debug:
                console.log("event %s %r value=%r" % (event.kind.name, event.token, event.value))
            yield event

        if trailing := scanner.remaining():
            descriptor = _positional(registry, trailing[0])
            for value in trailing:
                descriptor.count += 1
                if debug:
                    console.log("event %s %r value=%r" % (EventKind.POSITIONAL.name, value, value))
                yield Event(EventKind.POSITIONAL, descriptor, value, value)


def parse(argv, registry, handler, user=None, /, *, tables=None):
    """
    scan argv against the registry and dispatch one handler call per event.

    parameters
    - argv: sequence of strings with the program name at index 0.
    - registry: sextant.registry.Registry.
    - handler: callable(kind, descriptor, value, user).
    - user: opaque context passed to every handler call.
    - tables: pre-compiled Tables for this registry (compiled when omitted or
      when they belong to another registry or an older revision).

    returns
    - 0 when the scan completes, otherwise the first truthy handler result.

    raises
    - RegistrationError subclasses from compilation.
    - PositionalWithoutSlotError, InternalError (see classify()).
    """
    if not callable(handler):
        raise TypeError("parse() handler must be callable")

    with closing(events(argv, registry, tables=tables)) as stream:
        for event in stream:
            if result := handler(event.kind, event.descriptor, event.value, user):
                return result

    return 0


__all__ = (
    "EventKind",
    "Event",
    "classify",
    "events",
    "parse",
)
