"""
Sextant faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the engine
  can surface. Codes are grouped by domain so logs and searches stay predictable.
- SextantError: base type that carries message + options and knows how to render
  itself (rich) and how to surface itself (raise, or print and exit).
- trigger(): central entry point to surface any fault.
- getdoc(): host-provided documentation for a code.

Tiers
- Configuration time (RegistrationError and subclasses): the declared option
  table is wrong. Raised before any argv is touched; status 0xDEAD on hard exit.
- Parse time (ParseError): the command line cannot be delivered to the table
  (e.g. positional arguments without a positional collector).
- Engine bugs (InternalError): the dispatcher reached an inconsistent state.
  Status 0xDEAD on hard exit, never confused with a malformed command line.
- User input (InputError and subclasses): raised by the caller-facing parser
  layer on unknown options, missing arguments and unconvertible values.

Integration
- Code building a fault calls trigger(fault, settings=..., **context).
- Without shell mode the exception is raised; in shell mode it is rendered via
  rich on stderr and the process exits with the fault's status.
- settings.hard_exit drives shell mode for fatal faults, settings.shell for
  the others.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .config import HARD_EXIT_STATUS

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - registration (131xx)
      • DUPLICATE_SHORT, DUPLICATE_LONG, SHORT_NAME_TOO_LONG, OPTIONAL_ARG_ON_SHORT,
        MULTIPLE_POSITIONAL, NO_SHORT_OR_LONG, REGISTRY_FULL, INVALID_NAME,
        REGISTRY_SEALED
    - compilation (132xx)
      • CAPACITY_EXCEEDED
    - parsing (133xx)
      • POSITIONAL_WITHOUT_SLOT
    - engine (134xx)
      • INTERNAL
    - user input (135xx)
      • UNKNOWN_OPTION, MISSING_ARGUMENT, INVALID_VALUE
    """
    # --- registration errors (131xx) ---
    DUPLICATE_SHORT         = 13101
    DUPLICATE_LONG          = 13102
    SHORT_NAME_TOO_LONG     = 13103
    OPTIONAL_ARG_ON_SHORT   = 13104
    MULTIPLE_POSITIONAL     = 13105
    NO_SHORT_OR_LONG        = 13106
    REGISTRY_FULL           = 13107
    INVALID_NAME            = 13108
    REGISTRY_SEALED         = 13109

    # --- compilation errors (132xx) ---
    CAPACITY_EXCEEDED       = 13201

    # --- parse errors (133xx) ---
    POSITIONAL_WITHOUT_SLOT = 13301

    # --- engine errors (134xx) ---
    INTERNAL                = 13401

    # --- user input errors (135xx) ---
    UNKNOWN_OPTION          = 13501
    MISSING_ARGUMENT        = 13502
    INVALID_VALUE           = 13503

    def normalize(self):
        """
        the code as printed in fault headers: the number, unless the host
        application maps it to a label through __main__.__codes__.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class SextantError(Exception):
    """
    base fault: a message plus free-form, read-only options.

    recognized options
    - code (FaultCode), title (str), hint (str): rendering.
    - shell (bool): print and exit instead of raising.
    - colorful (bool), fancy (bool): rich styling.
    - anything else is context for the reader (descriptor, token, ...).
    """
    __code__ = FaultCode.INTERNAL
    __title__ = "error"
    __status__ = 1

    def __init__(self, message="", /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def status(self):
        return type(self).__status__

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # green arrow
            "hint": "italic #9CE19C",  # green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = text(getattr(main, "__prog__", self.options.get("prog", "sextant")), "prog-name")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy"):
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RegistrationError(SextantError):
    __title__ = "invalid option table"
    __status__ = HARD_EXIT_STATUS

class DuplicateShortError(RegistrationError):
    __code__ = FaultCode.DUPLICATE_SHORT
    __title__ = "duplicate short option"

class DuplicateLongError(RegistrationError):
    __code__ = FaultCode.DUPLICATE_LONG
    __title__ = "duplicate long option"

class ShortNameTooLongError(RegistrationError):
    __code__ = FaultCode.SHORT_NAME_TOO_LONG
    __title__ = "short option too long"

class OptionalArgOnShortError(RegistrationError):
    __code__ = FaultCode.OPTIONAL_ARG_ON_SHORT
    __title__ = "optional argument on short option"

class MultiplePositionalError(RegistrationError):
    __code__ = FaultCode.MULTIPLE_POSITIONAL
    __title__ = "multiple positional collectors"

class NoShortOrLongError(RegistrationError):
    __code__ = FaultCode.NO_SHORT_OR_LONG
    __title__ = "option without a name"

class RegistryFullError(RegistrationError):
    __code__ = FaultCode.REGISTRY_FULL
    __title__ = "option table full"

class InvalidNameError(RegistrationError):
    __code__ = FaultCode.INVALID_NAME
    __title__ = "invalid option name"

class RegistrySealedError(RegistrationError):
    __code__ = FaultCode.REGISTRY_SEALED
    __title__ = "option table in use"

class CapacityExceededError(RegistrationError):
    __code__ = FaultCode.CAPACITY_EXCEEDED
    __title__ = "option tables too large"


class ParseError(SextantError):
    __title__ = "cannot parse command line"

class PositionalWithoutSlotError(ParseError):
    __code__ = FaultCode.POSITIONAL_WITHOUT_SLOT
    __title__ = "unexpected positional"


class InternalError(SextantError):
    __code__ = FaultCode.INTERNAL
    __title__ = "internal consistency error"
    __status__ = HARD_EXIT_STATUS


class InputError(SextantError):
    __title__ = "bad command line"

class UnknownOptionError(InputError):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"

class MissingArgumentError(InputError):
    __code__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"

class InvalidValueError(InputError):
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


def trigger(fault, /, settings=None, **options):
    """
    raise (or print and exit with) a fault, after merging runtime options.

    rules
    - fault must provide __trigger__ and __replace__ methods (see SextantError).
    - when `settings` is given, shell mode is taken from settings.hard_exit for
      fatal faults (registration/internal) and from settings.shell otherwise;
      colorful/fancy follow the settings too. Explicit options win.
    - options are merged into the fault via copy.replace() before triggering.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")

    if settings is not None:
        fatal = isinstance(fault, RegistrationError | InternalError)
        options = {
            "shell": settings.hard_exit if fatal else settings.shell,
            "colorful": settings.colorful,
            "fancy": settings.fancy,
        } | options

    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    long-form documentation for a fault code, looked up in the host
    application's __main__.__docs__ mapping; None when absent.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "SextantError",
    "RegistrationError",
    "DuplicateShortError",
    "DuplicateLongError",
    "ShortNameTooLongError",
    "OptionalArgOnShortError",
    "MultiplePositionalError",
    "NoShortOrLongError",
    "RegistryFullError",
    "InvalidNameError",
    "RegistrySealedError",
    "CapacityExceededError",
    "ParseError",
    "PositionalWithoutSlotError",
    "InternalError",
    "InputError",
    "UnknownOptionError",
    "MissingArgumentError",
    "InvalidValueError",
    "trigger",
    "getdoc",
)
