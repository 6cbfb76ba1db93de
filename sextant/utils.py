"""
Sextant helpers shared by every layer.

Contents
- Unset: the "argument was not given" marker. It is distinct from None, which
  is a legitimate option default, and it is falsy so `x or fallback` still reads
  naturally.
- coalesce(object, default): swap Unset for a default and keep everything else,
  None/0/"" included.
- mirror(name): read-only property over the private `_name` slot.
- dashed(short=..., long=...): the command-line spelling of an option name.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> dashed(long="logging")
    '--logging'
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance per process: construction is memoized, copies
    and pickles resolve back to the module-level `Unset`, and subclassing is
    refused.
    """

    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return object.__new__(cls)

    def __init_subclass__(cls, **unused):
        raise TypeError("UnsetType cannot be subclassed")

    def __reduce__(self):
        return "Unset"

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """
    `default` when `object` is Unset, `object` otherwise.
    """
    return default if object is Unset else object


def mirror(name, /):
    """
    Build a read-only property returning `self._<name>`.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() expects the attribute name as a string")

    attribute = "_" + name

    def getter(self):
        return getattr(self, attribute)

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


def dashed(*, short="", long=""):
    """
    Return the command-line spelling of an option name.

    The short form wins when both are given; an empty string is returned when
    neither is.
    """
    if short:
        return "-" + short
    if long:
        return "--" + long
    return ""


Unset = UnsetType()


__all__ = (
    "Unset",
    "UnsetType",
    "coalesce",
    "dashed",
    "mirror",
)
