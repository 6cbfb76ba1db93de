r"""
Sextant option descriptors.

Overview
- ArgKind: whether an option's flag must, may, or must not be followed by a
  value, or whether the descriptor collects positional arguments.
- OptionDescriptor: one declared option, flag or positional collector.

Descriptor fields
- ident: caller-chosen handle (usually an int or an enum member) returned to the
  handler as part of the descriptor. It is not required to be unique text.
- short: "" or a single character ("l" for -l).
- long: "" or a name without dashes ("logging" for --logging).
- descr: opaque help text.
- kind: ArgKind.
- count: how many times the dispatcher matched this descriptor. This is the only
  mutable field; the dispatcher owns it during a parse pass.

Names are stored without dashes. Structural rules that depend on the rest of
the table (duplicates, single positional, GNU extensions) are enforced by
sextant.registry; this module only checks the shape of each field.

Quick example:
    >>> OptionDescriptor(1, "l", "logging", "set the log path", ArgKind.REQUIRED)
    option-descriptor(ident=1, short='l', long='logging', kind=<ArgKind.REQUIRED: 2>)
"""
from enum import IntEnum

from .utils import *


class ArgKind(IntEnum):
    NONE = 0  # argument is not expected
    OPTIONAL = 1  # argument is optional
    REQUIRED = 2  # argument is required
    POSITIONAL = 3  # descriptor collects bare arguments

    @property
    def expects(self):
        """
        True when the scanner must look for a value after this option.
        """
        return self is not ArgKind.NONE


class OptionDescriptor:
    """
    A declared option/flag/positional collector.

    Read-only properties mirror the constructor arguments; `count` is writable.
    Equality is identity: two descriptors with the same fields are still two
    entries of a table.
    """

    __slots__ = ("_ident", "_short", "_long", "_descr", "_kind", "count")

    ident = mirror("ident")
    short = mirror("short")
    long = mirror("long")
    descr = mirror("descr")
    kind = mirror("kind")

    def __init__(self, ident, short="", long="", descr="", kind=ArgKind.NONE):
        """
        Construct a descriptor.

        Parameters
        - ident: any hashable handle.
        - short: str; "" for no short form. Length is checked by the registry so
          that the table owner gets a ShortNameTooLong fault, not a TypeError.
        - long: str; "" for no long form. A leading "--" is accepted and stripped.
        - descr: str help text.
        - kind: ArgKind (plain ints are converted).

        Raises
        - TypeError: when a field has the wrong type.
        """
        try:
            hash(ident)
        except TypeError:
            raise TypeError("option descriptor 'ident' must be hashable") from None

        if not isinstance(short, str):
            raise TypeError("option descriptor 'short' must be a string")
        if not isinstance(long, str):
            raise TypeError("option descriptor 'long' must be a string")
        if not isinstance(descr, str):
            raise TypeError("option descriptor 'descr' must be a string")
        if not isinstance(kind, int) or isinstance(kind, bool):
            raise TypeError("option descriptor 'kind' must be an ArgKind")

        if long.startswith("--"):
            long = long[2:]

        self._ident = ident
        self._short = short
        self._long = long
        self._descr = descr
        self._kind = ArgKind(kind)
        self.count = 0

    @property
    def named(self):
        """
        True when the descriptor can be spelled on a command line.
        """
        return bool(self._short or self._long)

    @property
    def spelling(self):
        """
        Preferred command-line spelling: "--long" when available, else "-s".
        """
        return dashed(long=self._long) or dashed(short=self._short)

    def __repr__(self):
        return "option-descriptor(ident=%r, short=%r, long=%r, kind=%r)" % (
            self._ident, self._short, self._long, self._kind
        )

    def __rich_repr__(self):
        yield "ident", self._ident
        yield "short", self._short
        yield "long", self._long
        yield "kind", self._kind
        yield "count", self.count


__all__ = (
    "ArgKind",
    "OptionDescriptor",
)
