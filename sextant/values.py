"""
Sextant typed values.

The dispatcher only knows whether an option expects a string. This module owns
what that string becomes: a tagged variant (Value) over the supported kinds and
one generic setter (convert / Slot.assign) that works for all of them.

Kinds
- BOOL
- INT8, INT16, INT32, INT64 (signed) and UINT8, UINT16, UINT32, UINT64
- FLOAT
- STRING
- ENUM (a mapping from names to integers)
Any kind may be a vector: each occurrence appends instead of replacing.

Conversion rules
- integers: Python integer literal syntax with base prefixes ("0x1f", "0o17",
  "0b101", "42"; underscores allowed), then a range check against the declared
  width. Leading zeros on a decimal ("010") are rejected, never read as octal.
- floats: float() syntax ("1.5", "1e-3", "inf").
- booleans: 1/0, true/false, yes/no, on/off (case-insensitive).
- enums: exact name lookup; on failure the nearest name by edit distance is
  offered as a hint.

Failures raise InvalidValueError through faults.trigger, so shell-mode settings
apply.
"""
from collections.abc import Mapping
from enum import Enum

from .faults import *
from .fuzzy import edit_distance
from .utils import *


class Kind(Enum):
    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    STRING = "string"
    ENUM = "enum"

    @property
    def bounds(self):
        """
        (minimum, maximum) for integer kinds, None otherwise.
        """
        if self.value.startswith("uint"):
            return 0, 2 ** int(self.value[4:]) - 1
        if self.value.startswith("int"):
            bits = int(self.value[3:])
            return -2 ** (bits - 1), 2 ** (bits - 1) - 1
        return None


_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})

_INFERRED = {
    bool: Kind.BOOL,
    int: Kind.INT64,
    float: Kind.FLOAT,
    str: Kind.STRING,
}


class Value:
    """
    Tagged variant describing the destination of an option's argument.

    Parameters
    - kind: Kind.
    - vector: True to collect every occurrence into a list.
    - default: initial value (scalars) or initial items (vectors). Defaults to
      False for BOOL, None otherwise; vectors start empty.
    - mapping: name -> int mapping, required for ENUM and rejected otherwise.
    """

    __slots__ = ("_kind", "_vector", "_default", "_mapping")

    kind = mirror("kind")
    vector = mirror("vector")
    mapping = mirror("mapping")

    def __init__(self, kind, /, vector=False, default=Unset, mapping=Unset):
        if not isinstance(kind, Kind):
            raise TypeError("Value() kind must be a Kind")
        if kind is Kind.ENUM:
            if not isinstance(mapping, Mapping) or not mapping:
                raise TypeError("Value() of kind ENUM needs a non-empty mapping")
            for name, number in mapping.items():
                if not isinstance(name, str) or not isinstance(number, int):
                    raise TypeError("Value() enum mapping must map strings to integers")
            mapping = dict(mapping)
        elif mapping is not Unset:
            raise TypeError("Value() mapping is only allowed for ENUM kinds")

        self._kind = kind
        self._vector = bool(vector)
        self._default = default
        self._mapping = coalesce(mapping)

    @classmethod
    def infer(cls, type=str, /, vector=False, default=Unset):
        """
        Build a Value from a Python destination type.

        bool/int/float/str map to BOOL/INT64/FLOAT/STRING; a Mapping is taken as
        an enum mapping; a Kind is used as-is.
        """
        if isinstance(type, Kind):
            return cls(type, vector=vector, default=default)
        if isinstance(type, Mapping):
            return cls(Kind.ENUM, vector=vector, default=default, mapping=type)
        try:
            return cls(_INFERRED[type], vector=vector, default=default)
        except (KeyError, TypeError):
            raise TypeError("cannot infer a value kind from %r" % (type,)) from None

    @property
    def default(self):
        if self._vector:
            return list(coalesce(self._default, ()))
        return coalesce(self._default, False if self._kind is Kind.BOOL else None)

    def __repr__(self):
        return "value(kind=%s, vector=%r)" % (self._kind.value, self._vector)


def convert(value, text, /, settings=None, **context):
    """
    Convert one command-line string according to a Value.

    Returns the converted Python object, or triggers InvalidValueError.
    """
    if not isinstance(text, str):
        raise TypeError("convert() text must be a string")

    kind = value.kind

    def fail(message, hint=None):
        trigger(InvalidValueError(message, **({"hint": hint} if hint else {})), settings=settings, text=text, **context)

    match kind:
        case Kind.STRING:
            return text

        case Kind.BOOL:
            if (lowered := text.strip().lower()) in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            fail("%r is not a boolean" % text, "use one of: true, false, yes, no, on, off, 1, 0")

        case Kind.FLOAT:
            try:
                return float(text)
            except ValueError:
                fail("%r is not a number" % text)

        case Kind.ENUM:
            try:
                return value.mapping[text]
            except KeyError:
                names = list(value.mapping)
                nearest = min(names, key=lambda name: edit_distance(text, name))
                fail(
                    "%r is not one of %s" % (text, ", ".join(names)),
                    "did you mean %r?" % nearest,
                )

        case _:
            try:
                number = int(text.strip(), 0)
            except ValueError:
                fail("%r is not an integer" % text)
            low, high = kind.bounds
            if not low <= number <= high:
                fail("%d is out of range for %s" % (number, kind.value), "use a value between %d and %d" % (low, high))
            return number


class Slot:
    """
    Current value of one destination.

    A scalar slot is overwritten by every assignment; a vector slot appends.
    `seen` counts assignments.
    """

    __slots__ = ("value", "current", "seen")

    def __init__(self, value, /):
        if not isinstance(value, Value):
            raise TypeError("Slot() argument must be a Value")
        self.value = value
        self.current = value.default
        self.seen = 0

    def assign(self, text, /, settings=None, **context):
        """
        Convert `text` and store it. Returns the converted object.
        """
        converted = convert(self.value, text, settings, **context)
        self.store(converted)
        return converted

    def flag(self):
        """
        Mark a presence-only option: BOOL slots become True, scalar integer
        slots count occurrences (-vvv).
        """
        match self.value.kind:
            case Kind.BOOL:
                converted = True
            case kind if kind.bounds is not None and not self.value.vector:
                converted = (self.current or 0) + 1
            case _:
                raise TypeError("flag() needs a BOOL or scalar integer slot, not %r" % self.value)
        self.store(converted)
        return converted

    def store(self, converted):
        """
        Store an already converted object (appending for vectors).
        """
        self.seen += 1
        if self.value.vector:
            self.current.append(converted)
        else:
            self.current = converted

    def __repr__(self):
        return "slot(%r, current=%r)" % (self.value, self.current)


__all__ = (
    "Kind",
    "Value",
    "Slot",
    "convert",
)
