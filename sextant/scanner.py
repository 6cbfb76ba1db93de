"""
Sextant scanner: a getopt_long work-alike driven by compiled tables.

The scanner walks argv the way GNU getopt_long does with a "-:" short-option
string, producing one Signal per call:

    code 0      a long option matched; `index` points into tables.longopts
    code 1      a non-option argument, returned in place; `optarg` is the token
    code '?'    an unknown option (or a value given to a no-argument long option)
    code ':'    an option whose required argument is missing
    code 'c'    the short option character c matched

Grammar
- argv[0] is the program name and is never scanned.
- "--" ends option scanning; `optind` then points at the first trailing
  argument, which the dispatcher delivers as positionals.
- "-" alone is a non-option argument.
- Long options: --name, --name=VALUE, or --name VALUE (required arguments only).
  Optional long arguments only accept --name=VALUE. Names match exactly; GNU's
  unique-prefix abbreviation is deliberately not performed so that misspellings
  reach the fuzzy matcher.
- Short options: clusters (-abc), attached values (-xVALUE) and detached values
  (-x VALUE) for required arguments; optional short arguments (GNU "x::") only
  accept the attached form.

Each Signal also carries `token`, the option as written without any "=VALUE"
tail ("--name", or "-c" for a short character), for diagnostics.
"""
from typing import NamedTuple

from .compiler import HasArg

LONG = 0
NONOPTION = 1
UNKNOWN = "?"
MISSING = ":"


class Signal(NamedTuple):
    code: int | str
    optarg: str | None = None
    index: int = -1
    token: str = ""


class Scanner:
    """
    Iterator of Signal records over argv.

    Parameters
    - argv: sequence of strings, program name at index 0.
    - tables: sextant.compiler.Tables.

    Attributes
    - optind: index of the next argv element to scan. After exhaustion it is
      the index of the first trailing argument (past "--"), or len(argv).
    """

    def __init__(self, argv, tables, /):
        if isinstance(argv, str):
            raise TypeError("Scanner() argv must be a sequence of strings, not a string")
        self.argv = list(argv)
        for item in self.argv:
            if not isinstance(item, str):
                raise TypeError("Scanner() argv items must be strings")
        self.tables = tables
        self.optind = 1
        self._nextchar = ""
        self._done = False

    def __iter__(self):
        return self

    def __next__(self):
        if self._done:
            raise StopIteration

        if not self._nextchar:
            if self.optind >= len(self.argv):
                self._done = True
                raise StopIteration

            argument = self.argv[self.optind]

            if argument == "--":
                self.optind += 1
                self._done = True
                raise StopIteration

            if not argument.startswith("-") or argument == "-":
                self.optind += 1
                return Signal(NONOPTION, argument)

            if argument.startswith("--"):
                return self._long(argument)

            self._nextchar = argument[1:]

        return self._short()

    def _long(self, argument):
        self.optind += 1
        name, separator, value = argument[2:].partition("=")
        token = "--" + name

        if (index := self.tables.lookup(name)) < 0:
            return Signal(UNKNOWN, token=token)

        match self.tables.longopts[index].has_arg:
            case HasArg.NO:
                if separator:
                    return Signal(UNKNOWN, value, token=token)
                return Signal(LONG, None, index, token)
            case HasArg.OPTIONAL:
                return Signal(LONG, value if separator else None, index, token)
            case HasArg.REQUIRED:
                if separator:
                    return Signal(LONG, value, index, token)
                if self.optind < len(self.argv):
                    value = self.argv[self.optind]
                    self.optind += 1
                    return Signal(LONG, value, index, token)
                return Signal(MISSING, token=token)

    def _short(self):
        char, self._nextchar = self._nextchar[0], self._nextchar[1:]
        if not self._nextchar:
            self.optind += 1
        token = "-" + char

        known, has_arg = self.tables.shortspec(char)
        if not known:
            return Signal(UNKNOWN, token=token)

        match has_arg:
            case HasArg.REQUIRED:
                if self._nextchar:
                    value, self._nextchar = self._nextchar, ""
                    self.optind += 1
                    return Signal(char, value, token=token)
                if self.optind < len(self.argv):
                    value = self.argv[self.optind]
                    self.optind += 1
                    return Signal(char, value, token=token)
                return Signal(MISSING, token=token)
            case HasArg.OPTIONAL:
                if self._nextchar:
                    value, self._nextchar = self._nextchar, ""
                    self.optind += 1
                    return Signal(char, value, token=token)
                return Signal(char, None, token=token)
            case _:
                return Signal(char, None, token=token)

    def remaining(self):
        """
        Arguments left after the scan stopped (in original order).
        """
        return self.argv[self.optind:]


__all__ = (
    "LONG",
    "NONOPTION",
    "UNKNOWN",
    "MISSING",
    "Signal",
    "Scanner",
)
