"""
Sextant parser facade.

Parser bundles the pieces a program usually wants in one object: a Registry,
one typed Slot per declared option, cached compiled tables, and an event handler
that turns the dispatcher's events into a plain dict of results.

Declaring
- flag(): presence-only option (bool), or an occurrence counter with type=int.
- option(): option with a required (or, with optional=True, optional) value.
- vector(): option collecting every occurrence into a list.
- positional(): the positional collector (bare arguments and everything after "--").
- enum() / enums(): named choices mapped to integers, scalar or vector.

Every declaration returns the registered OptionDescriptor. Results are keyed by
a destination name derived from the long name ("log-file" -> "log_file"), then
the short name, unless `dest` is given.

Parsing
- parse(argv) returns {dest: value}. Unknown options and missing arguments
  surface as UnknownOptionError / MissingArgumentError with a "did you mean"
  hint taken from the fuzzy suggestion; bad values as InvalidValueError.
- With shell=True those faults are printed and the process exits with status 1.

Quick example:
    >>> parser = Parser("demo")
    >>> descriptor = parser.option("l", "logging", "set the log path")
    >>> parser.parse(["demo", "--logging", "out.log"])
    {'logging': 'out.log'}
"""
import os
import sys
from contextlib import closing

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .compiler import compile
from .config import settings as _settings
from .dispatcher import EventKind, events
from .faults import *
from .options import ArgKind, OptionDescriptor
from .registry import Registry
from .utils import *
from .values import Kind, Slot, Value

console = Console()


class Parser:
    """
    Declarative front end over Registry + dispatcher.

    Parameters
    - prog: program name used in help and fault headers (defaults to the
      basename of sys.argv[0]).
    - descr: one-line description shown as the help caption.
    - **overrides: settings fields (gnu, shell, hard_exit, debug, ...).
    """

    def __init__(self, prog=Unset, /, descr="", **overrides):
        self._prog = prog
        self._descr = descr
        self._settings = _settings(**overrides)
        self._registry = Registry(settings=self._settings)
        self._destinations = {}
        self._values = {}
        self._consts = {}
        self._tables = None

    settings = mirror("settings")
    registry = mirror("registry")

    @property
    def prog(self):
        return coalesce(self._prog, os.path.basename(sys.argv[0]) if sys.argv else "sextant")

    def _declare(self, short, long, descr, kind, value, dest, const=Unset):
        if long.startswith("--"):
            long = long[2:]

        dest = coalesce(dest, (long or short).replace("-", "_"))
        if not dest and kind is ArgKind.POSITIONAL:
            dest = "positionals"
        if not isinstance(dest, str) or not dest:
            raise ValueError("cannot derive a destination name, pass dest=")
        if dest in self._destinations.values():
            raise ValueError("destination %r is already used by another option" % dest)

        ident = len(self._registry)
        descriptor = self._registry.add(OptionDescriptor(ident, short, long, descr, kind))

        self._destinations[ident] = dest
        self._values[ident] = value
        if const is not Unset:
            self._consts[ident] = const
        return descriptor

    def flag(self, short="", long="", descr="", *, type=bool, dest=Unset):
        """
        Declare a presence-only option.

        type=bool stores True when given; type=int counts occurrences (-vvv -> 3).
        """
        if type is bool:
            value = Value(Kind.BOOL)
        elif type is int:
            value = Value(Kind.INT64, default=0)
        else:
            raise TypeError("flag() type must be bool or int")
        return self._declare(short, long, descr, ArgKind.NONE, value, dest)

    def option(self, short="", long="", descr="", *, type=str, default=None, kind=Unset, optional=False, const=Unset, dest=Unset):
        """
        Declare an option taking one value.

        - type: bool, int, float, str, or a Kind.
        - kind: a Kind overriding the one inferred from `type` (e.g. Kind.UINT8).
        - optional: the value may be omitted (long form --name=VALUE only; short
          form needs gnu=True). The slot then receives `const`, when given.
        """
        value = Value.infer(coalesce(kind, type), default=default)
        arg = ArgKind.OPTIONAL if optional else ArgKind.REQUIRED
        return self._declare(short, long, descr, arg, value, dest, const)

    def vector(self, short="", long="", descr="", *, type=str, kind=Unset, default=(), dest=Unset):
        """
        Declare an option whose every occurrence appends to a list.
        """
        value = Value.infer(coalesce(kind, type), vector=True, default=default)
        return self._declare(short, long, descr, ArgKind.REQUIRED, value, dest)

    def positional(self, short="", long="", descr="", *, type=str, kind=Unset, dest=Unset):
        """
        Declare the positional collector. Only one is allowed per parser.
        """
        value = Value.infer(coalesce(kind, type), vector=True)
        return self._declare(short, long, descr, ArgKind.POSITIONAL, value, dest)

    def enum(self, short="", long="", descr="", mapping=None, *, default=None, dest=Unset):
        """
        Declare an option whose value is one of `mapping`'s names, stored as the
        mapped integer.
        """
        value = Value(Kind.ENUM, default=default, mapping=mapping)
        return self._declare(short, long, descr, ArgKind.REQUIRED, value, dest)

    def enums(self, short="", long="", descr="", mapping=None, *, dest=Unset):
        """
        Vector flavour of enum().
        """
        value = Value(Kind.ENUM, vector=True, mapping=mapping)
        return self._declare(short, long, descr, ArgKind.REQUIRED, value, dest)

    def tables(self):
        """
        Compiled tables for the current registry, recompiled only when the
        registry changed since the last call.
        """
        if self._tables is None or not self._tables.current(self._registry):
            self._tables = compile(self._registry)
        return self._tables

    def _fail(self, fault, /, **context):
        trigger(fault, settings=self._settings, prog=self.prog, **context)

    def _suggest(self, event):
        if (descriptor := event.descriptor) is None:
            return None
        if event.kind is EventKind.UNKNOWN_SHORT:
            spelling = dashed(short=descriptor.short)
        else:
            spelling = dashed(long=descriptor.long)
        return "did you mean %r?" % spelling if spelling else None

    def _handle(self, event, slots):
        kind, descriptor, value = event.kind, event.descriptor, event.value

        if kind.unknown:
            if descriptor is not None and descriptor.kind is ArgKind.POSITIONAL and event.token == dashed(long=descriptor.long):
                return self._fail(UnknownOptionError(
                    "unknown option %r" % event.token,
                    hint="pass the values as bare arguments",
                ), token=event.token, descriptor=descriptor)
            if value is not None and descriptor is not None and event.token == descriptor.spelling:
                return self._fail(InvalidValueError(
                    "option %r does not take a value" % event.token,
                    hint="use %r on its own" % event.token,
                ), token=event.token, descriptor=descriptor)
            return self._fail(UnknownOptionError(
                "unknown option %r" % event.token,
                **({"hint": hint} if (hint := self._suggest(event)) else {}),
            ), token=event.token, descriptor=descriptor)

        if kind.missing:
            return self._fail(MissingArgumentError(
                "option %r requires an argument" % event.token,
                hint="pass a value, e.g. %r" % (event.token + " VALUE"),
            ), token=event.token, descriptor=descriptor)

        slot = slots[descriptor.ident]
        if value is not None:
            slot.assign(value, self._settings, prog=self.prog, token=event.token, descriptor=descriptor)
        elif descriptor.kind is ArgKind.NONE:
            slot.flag()
        elif descriptor.ident in self._consts:
            slot.store(self._consts[descriptor.ident])

    def parse(self, argv=Unset, /):
        """
        Parse argv (default sys.argv) and return {dest: value}.
        """
        argv = coalesce(argv, sys.argv)
        tables = self.tables()
        slots = {ident: Slot(value) for ident, value in self._values.items()}

        self._registry.reset()
        with closing(events(argv, self._registry, tables=tables)) as stream:
            for event in stream:
                self._handle(event, slots)

        return {self._destinations[ident]: slot.current for ident, slot in slots.items()}

    def help(self):
        """
        Rich table describing every declared option.
        """
        table = Table(
            title=self.prog,
            caption=self._descr or None,
            box=None,
            show_header=True,
            header_style="bold" if self._settings.colorful else "",
        )
        table.add_column("short", style="cyan" if self._settings.colorful else "")
        table.add_column("long", style="cyan" if self._settings.colorful else "")
        table.add_column("argument")
        table.add_column("description")

        for descriptor in self._registry:
            value = self._values[descriptor.ident]
            match descriptor.kind:
                case ArgKind.NONE:
                    argument = ""
                case ArgKind.POSITIONAL:
                    argument = "ARGS..."
                case _:
                    argument = (
                        "{%s}" % ",".join(value.mapping) if value.kind is Kind.ENUM else value.kind.value.upper()
                    )
                    if value.vector:
                        argument += "..."
                    if descriptor.kind is ArgKind.OPTIONAL:
                        argument = "[%s]" % argument
            descr = descriptor.descr
            if descriptor.kind is ArgKind.POSITIONAL and descriptor.long:
                # the long name is only a destination; it is not a command-line option
                descr = " ".join(filter(None, (descr, "(values are passed as bare arguments)")))
            table.add_row(
                dashed(short=descriptor.short),
                dashed(long=descriptor.long) if descriptor.kind is not ArgKind.POSITIONAL else "",
                Text(argument),
                Text(descr),
            )
        return table

    def print_help(self, file=None):
        (console if file is None else Console(file=file)).print(self.help())

    def __repr__(self):
        return "parser(prog=%r, options=%d)" % (self.prog, len(self._registry))


__all__ = (
    "Parser",
)
