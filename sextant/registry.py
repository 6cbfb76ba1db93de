"""
Sextant option registry.

A Registry is an ordered, caller-owned table of OptionDescriptor records. It is
the only structure the compiler and the dispatcher read from, and it enforces
the table invariants before any argv is touched:

- at most one POSITIONAL descriptor;
- every non-positional descriptor has a short name, a long name, or both;
- short names are exactly one character and unique;
- long names are unique;
- OPTIONAL descriptors cannot have a short name unless GNU extensions are on
  (the short-option grammar cannot express an optional argument otherwise);
- short/long names must be expressible in the compiled encodings;
- the table holds at most settings.capacity descriptors.

add() checks every invariant incrementally and leaves the table untouched on
failure. validate() re-checks the table-wide ones before compilation.

Lookups are linear scans in registration order; tables are small.

While a parse pass runs the registry is sealed (see sealed()); add() then fails
with RegistrySealedError. `revision` increments on every successful add() so
derived artifacts (compiled tables) can be cached safely.
"""
from contextlib import contextmanager

from .config import settings as _settings
from .faults import *
from .options import ArgKind, OptionDescriptor
from .utils import *

# Characters with a meaning in the compiled short-option string or argv grammar.
_RESERVED = frozenset("-:?=")


class Registry:
    """
    Ordered table of option descriptors.

    Parameters
    - descriptors: optional iterable of OptionDescriptor, added in order.
    - settings: a sextant.config.Settings; defaults to settings().

    The registry supports len(), iteration (registration order), indexing and
    membership tests on descriptors.
    """

    def __init__(self, descriptors=(), /, *, settings=None):
        self._settings = _settings() if settings is None else settings
        self._descriptors = []
        self._sealed = False
        self._revision = 0
        for descriptor in descriptors:
            self.add(descriptor)

    settings = mirror("settings")
    revision = mirror("revision")

    @property
    def locked(self):
        return self._sealed

    def __len__(self):
        return len(self._descriptors)

    def __iter__(self):
        return iter(self._descriptors)

    def __getitem__(self, index):
        return self._descriptors[index]

    def __contains__(self, descriptor):
        return any(descriptor is entry for entry in self._descriptors)

    def __repr__(self):
        return "registry(%s)" % ", ".join(map(repr, self._descriptors))

    def _fail(self, fault, /, **context):
        trigger(fault, settings=self._settings, **context)

    def add(self, descriptor, /):
        """
        Append a descriptor after checking every table invariant.

        Returns the descriptor (fluent style). On failure the matching
        RegistrationError subclass is triggered and the table is unchanged.
        """
        if not isinstance(descriptor, OptionDescriptor):
            raise TypeError("add() argument must be an OptionDescriptor")

        if self._sealed:
            return self._fail(RegistrySealedError(
                "cannot add %r while a parse pass is using the table" % descriptor.spelling,
                hint="declare every option before parsing",
            ), descriptor=descriptor)

        if len(self._descriptors) >= self._settings.capacity:
            return self._fail(RegistryFullError(
                "the table already holds %d options" % self._settings.capacity,
                hint="raise the 'capacity' setting or declare fewer options",
            ), descriptor=descriptor)

        short, long = descriptor.short, descriptor.long

        if short:
            if len(short) > 1:
                return self._fail(ShortNameTooLongError(
                    "short option %r must be a single character" % short,
                    hint="remove the excess characters or use a long option instead",
                ), descriptor=descriptor)
            if short in _RESERVED or short.isspace():
                return self._fail(InvalidNameError(
                    "%r cannot be used as a short option" % short,
                    hint="pick a letter or a digit",
                ), descriptor=descriptor)
            if self.find_by_short(short) is not None:
                return self._fail(DuplicateShortError(
                    "short option '-%s' is declared twice" % short,
                    hint="remove or rename one of the '-%s' options" % short,
                ), descriptor=descriptor)
            if descriptor.kind is ArgKind.OPTIONAL and not self._settings.gnu:
                return self._fail(OptionalArgOnShortError(
                    "short option '-%s' cannot take an optional argument" % short,
                    hint="drop the short name, use a required argument, or enable gnu extensions",
                ), descriptor=descriptor)

        if long:
            if long.startswith("-") or any(char == "=" or char.isspace() for char in long):
                return self._fail(InvalidNameError(
                    "%r cannot be used as a long option" % long,
                    hint="long names cannot start with '-' or contain '=' or spaces",
                ), descriptor=descriptor)
            if self.find_by_long(long) is not None:
                return self._fail(DuplicateLongError(
                    "long option '--%s' is declared twice" % long,
                    hint="remove or rename one of the '--%s' options" % long,
                ), descriptor=descriptor)

        if descriptor.kind is ArgKind.POSITIONAL:
            if self.positional() is not None:
                return self._fail(MultiplePositionalError(
                    "only one positional collector is permitted",
                    hint="remove the additional positional options",
                ), descriptor=descriptor)
        elif not descriptor.named:
            return self._fail(NoShortOrLongError(
                "option %r has neither a short nor a long name" % (descriptor.ident,),
                hint="give it a short name, a long name, or both",
            ), descriptor=descriptor)

        self._descriptors.append(descriptor)
        self._revision += 1
        return descriptor

    def validate(self):
        """
        Re-check the table-wide invariants (positional count, unnamed options).
        """
        if self.positional_count() > 1:
            return self._fail(MultiplePositionalError(
                "%d positional collectors declared, only one is permitted" % self.positional_count(),
                hint="remove the additional positional options",
            ))
        for descriptor in self._descriptors:
            if descriptor.kind is not ArgKind.POSITIONAL and not descriptor.named:
                return self._fail(NoShortOrLongError(
                    "option %r has neither a short nor a long name" % (descriptor.ident,),
                    hint="give it a short name, a long name, or both",
                ), descriptor=descriptor)

    def find_by_short(self, char, /):
        for descriptor in self._descriptors:
            if descriptor.short and descriptor.short == char:
                return descriptor
        return None

    def find_by_long(self, name, /, exclude=Unset):
        """
        Return the first descriptor whose long name is `name`.

        Descriptors whose ident equals `exclude` are skipped, which lets a caller
        look for *another* owner of the same long name.
        """
        for descriptor in self._descriptors:
            if exclude is not Unset and descriptor.ident == exclude:
                continue
            if descriptor.long and descriptor.long == name:
                return descriptor
        return None

    def positional(self):
        for descriptor in self._descriptors:
            if descriptor.kind is ArgKind.POSITIONAL:
                return descriptor
        return None

    def positional_count(self):
        return sum(descriptor.kind is ArgKind.POSITIONAL for descriptor in self._descriptors)

    def reset(self):
        """
        Zero every occurrence counter.
        """
        for descriptor in self._descriptors:
            descriptor.count = 0

    @contextmanager
    def sealed(self):
        """
        Hold the table read-only for the duration of a parse pass.

        Re-entrant use is rejected: a table belongs to one in-flight pass.
        """
        if self._sealed:
            raise RuntimeError("registry is already in use by another parse pass")
        self._sealed = True
        try:
            yield self
        finally:
            self._sealed = False


__all__ = (
    "Registry",
)
