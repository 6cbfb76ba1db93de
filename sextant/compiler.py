"""
Sextant option-string compiler.

compile() turns a validated Registry into the two tables a getopt_long-style
scanner consumes:

- shortopts: a getopt short-option string. It starts with two control markers:
    '-'  return non-option arguments in place (as code 1)
    ':'  return ':' instead of '?' when a required argument is missing
  followed, for every descriptor with a short name, by its character and
    ':'   argument required (REQUIRED or POSITIONAL)
    '::'  argument optional (OPTIONAL, GNU extensions only)
  e.g. "-:l:iv" for -l VALUE, -i and -v.

- longopts: a tuple of LongOption(name, has_arg, ident), one per descriptor with
  a long name. Positional collectors never appear; they are reached through the
  non-option path only.

Bounds
- settings.short_max limits the length of shortopts and settings.long_max the
  number of long entries; exceeding either is a CapacityExceededError, never a
  silent truncation.
"""
from enum import IntEnum
from typing import NamedTuple

from rich.console import Console

from .faults import *
from .options import ArgKind
from .utils import *

console = Console(stderr=True)

CONTROL = "-:"


class HasArg(IntEnum):
    NO = 0
    REQUIRED = 1
    OPTIONAL = 2


class LongOption(NamedTuple):
    name: str
    has_arg: HasArg
    ident: object


class Tables(NamedTuple):
    shortopts: str
    longopts: tuple
    revision: int = 0
    origin: int = 0

    def current(self, registry, /):
        """
        True when these tables were compiled from `registry` at its present
        revision.
        """
        return self.origin == id(registry) and self.revision == registry.revision

    def lookup(self, name, /):
        """
        Return the index of the long entry called `name`, or -1.
        """
        for index, option in enumerate(self.longopts):
            if option.name == name:
                return index
        return -1

    def shortspec(self, char, /):
        """
        Return (known, has_arg) for a short option character.
        """
        if char in CONTROL or (index := self.shortopts.find(char, len(CONTROL))) < 0:
            return False, HasArg.NO
        tail = self.shortopts[index + 1:index + 3]
        if tail == "::":
            return True, HasArg.OPTIONAL
        if tail[:1] == ":":
            return True, HasArg.REQUIRED
        return True, HasArg.NO


_MODES = {
    ArgKind.NONE: HasArg.NO,
    ArgKind.OPTIONAL: HasArg.OPTIONAL,
    ArgKind.REQUIRED: HasArg.REQUIRED,
}


def compile(registry, /, *, gnu=Unset, short_max=Unset, long_max=Unset):
    """
    compile a registry into (shortopts, longopts) tables.

    parameters
    - registry: sextant.registry.Registry (validated first).
    - gnu / short_max / long_max: override the registry's settings for this
      compilation only.

    returns
    - Tables(shortopts, longopts, revision, origin) where revision is the
      registry revision the tables were derived from and origin is id(registry).

    raises (via trigger, so hard-exit settings apply)
    - OptionalArgOnShortError, DuplicateShortError, DuplicateLongError,
      ShortNameTooLongError, CapacityExceededError, and validate() faults.
    """
    settings = registry.settings
    gnu = coalesce(gnu, settings.gnu)
    short_max = coalesce(short_max, settings.short_max)
    long_max = coalesce(long_max, settings.long_max)

    registry.validate()

    shortopts = CONTROL
    for descriptor in registry:
        if not (short := descriptor.short):
            continue

        if len(short) > 1:
            trigger(ShortNameTooLongError(
                "short option %r must be a single character" % short,
                hint="remove the excess characters or use a long option instead",
            ), settings=settings, descriptor=descriptor)

        if short in shortopts:
            trigger(DuplicateShortError(
                "short option '-%s' is declared twice" % short,
                hint="remove or rename one of the '-%s' options" % short,
            ), settings=settings, descriptor=descriptor)

        if descriptor.kind is ArgKind.OPTIONAL and not gnu:
            trigger(OptionalArgOnShortError(
                "short option '-%s' cannot take an optional argument" % short,
                hint="drop the short name, use a required argument, or enable gnu extensions",
            ), settings=settings, descriptor=descriptor)

        match descriptor.kind:
            case ArgKind.REQUIRED | ArgKind.POSITIONAL:
                fragment = short + ":"
            case ArgKind.OPTIONAL:
                fragment = short + "::"
            case _:
                fragment = short

        if len(shortopts) + len(fragment) > short_max:
            trigger(CapacityExceededError(
                "the short option string needs more than %d characters" % short_max,
                hint="raise the 'short_max' setting",
            ), settings=settings, descriptor=descriptor)

        shortopts += fragment

    longopts = []
    for descriptor in registry:
        if not (long := descriptor.long) or descriptor.kind is ArgKind.POSITIONAL:
            continue

        if registry.find_by_long(long, exclude=descriptor.ident) is not None:
            trigger(DuplicateLongError(
                "long option '--%s' is declared twice" % long,
                hint="remove or rename one of the '--%s' options" % long,
            ), settings=settings, descriptor=descriptor)

        if len(longopts) + 1 > long_max:
            trigger(CapacityExceededError(
                "the long option table needs more than %d entries" % long_max,
                hint="raise the 'long_max' setting",
            ), settings=settings, descriptor=descriptor)

        longopts.append(LongOption(long, _MODES[descriptor.kind], descriptor.ident))

    tables = Tables(shortopts, tuple(longopts), registry.revision, id(registry))

    if settings.debug:
        console.log("short options: %r" % tables.shortopts)
        for index, option in enumerate(tables.longopts):
            console.log("%i - name=%s, has_arg=%s, ident=%r" % (index, option.name, option.has_arg.name, option.ident))

    return tables


__all__ = (
    "HasArg",
    "LongOption",
    "Tables",
    "compile",
)
