"""
Dispatcher behavioral tests (classification, event order, aborts, faults).

Scope
- End-to-end event sequences for mixed short/long/positional command lines.
- Unknown options and missing arguments resolved through the fuzzy matcher.
- Handler abort propagation and the "--" trailing phase.
- Occurrence counters, sealing, table caching.
- Positional arguments without a collector and engine consistency faults.

Conventions
- Test method names follow CamelCase per project convention.
- A recording handler collects (kind, descriptor ident, value) triples.
"""
import unittest
from unittest import TestCase, mock

from sextant import faults
from sextant.compiler import *
from sextant.config import settings
from sextant.dispatcher import *
from sextant.faults import *
from sextant.options import *
from sextant.registry import *
from sextant.scanner import Signal


class Recorder:
    """
    Handler collecting (kind, ident, value) and aborting on request.
    """

    def __init__(self, abort=None):
        self.calls = []
        self.abort = abort

    def __call__(self, kind, descriptor, value, user):
        self.calls.append((kind, None if descriptor is None else descriptor.ident, value))
        if self.abort is not None and len(self.calls) == self.abort:
            return 7
        return 0


def build(*, positional=True, **overrides):
    descriptors = [
        OptionDescriptor("logging", "l", "logging", "set the log path", ArgKind.REQUIRED),
        OptionDescriptor("two", long="two", kind=ArgKind.REQUIRED),
        OptionDescriptor("verbose", "v", "verbose"),
    ]
    if positional:
        descriptors.append(OptionDescriptor("files", long="files", kind=ArgKind.POSITIONAL))
    return Registry(descriptors, settings=settings(**overrides))


class EndToEndTest(TestCase):

    def testMixedCommandLine(self):
        registry = build()
        recorder = Recorder()
        result = parse(["prog", "-l", "foo", "--two=bar", "extra1", "extra2"], registry, recorder)
        self.assertEqual(result, 0)
        self.assertEqual(recorder.calls, [
            (EventKind.SHORT, "logging", "foo"),
            (EventKind.LONG, "two", "bar"),
            (EventKind.POSITIONAL, "files", "extra1"),
            (EventKind.POSITIONAL, "files", "extra2"),
        ])

    def testPositionalWithoutCollector(self):
        registry = build(positional=False)
        recorder = Recorder()
        with self.assertRaises(PositionalWithoutSlotError) as context:
            parse(["prog", "extra1"], registry, recorder)
        self.assertEqual(recorder.calls, [])
        self.assertEqual(context.exception.options["token"], "extra1")

    def testUnknownLongResolvesToNearestName(self):
        registry = build()
        recorder = Recorder()
        parse(["prog", "--logg"], registry, recorder)
        self.assertEqual(recorder.calls, [(EventKind.UNKNOWN_LONG, "logging", None)])

    def testUnknownShort(self):
        recorder = Recorder()
        parse(["prog", "-x"], build(), recorder)
        self.assertEqual(recorder.calls, [(EventKind.UNKNOWN_SHORT, "logging", None)])

    def testUnknownWithNothingClose(self):
        registry = Registry([OptionDescriptor("files", kind=ArgKind.POSITIONAL)])
        recorder = Recorder()
        parse(["prog", "--whatever"], registry, recorder)
        self.assertEqual(recorder.calls, [(EventKind.UNKNOWN_NONE, None, None)])

    def testMissingArgument(self):
        recorder = Recorder()
        parse(["prog", "--two"], build(), recorder)
        self.assertEqual(recorder.calls, [(EventKind.ARG_MISSING_LONG, "two", None)])

        recorder = Recorder()
        parse(["prog", "-l"], build(), recorder)
        self.assertEqual(recorder.calls, [(EventKind.ARG_MISSING_SHORT, "logging", None)])

    def testValueOnFlagIsUnknown(self):
        recorder = Recorder()
        parse(["prog", "--verbose=yes"], build(), recorder)
        self.assertEqual(recorder.calls, [(EventKind.UNKNOWN_LONG, "verbose", "yes")])

    def testTrailingArgumentsArePositional(self):
        recorder = Recorder()
        parse(["prog", "-v", "--", "-l", "x"], build(), recorder)
        self.assertEqual(recorder.calls, [
            (EventKind.SHORT, "verbose", None),
            (EventKind.POSITIONAL, "files", "-l"),
            (EventKind.POSITIONAL, "files", "x"),
        ])

    def testTrailingArgumentsWithoutCollector(self):
        recorder = Recorder()
        with self.assertRaises(PositionalWithoutSlotError):
            parse(["prog", "-v", "--", "x"], build(positional=False), recorder)
        self.assertEqual(recorder.calls, [(EventKind.SHORT, "verbose", None)])

    def testUserContextIsPassedThrough(self):
        seen = []
        context = object()
        parse(["prog", "-v"], build(), lambda kind, descriptor, value, user: seen.append(user))
        parse(["prog", "-v"], build(), lambda kind, descriptor, value, user: seen.append(user), context)
        self.assertEqual(seen, [None, context])


class AbortTest(TestCase):

    def testFirstTruthyResultStopsTheScan(self):
        recorder = Recorder(abort=2)
        result = parse(["prog", "-v", "-l", "foo", "extra"], build(), recorder)
        self.assertEqual(result, 7)
        self.assertEqual(len(recorder.calls), 2)

    def testAbortDuringTrailingPhase(self):
        recorder = Recorder(abort=2)
        result = parse(["prog", "--", "a", "b", "c"], build(), recorder)
        self.assertEqual(result, 7)
        self.assertEqual([value for _, _, value in recorder.calls], ["a", "b"])

    def testRegistryIsReleasedAfterAbort(self):
        registry = build()
        parse(["prog", "-v"], registry, Recorder(abort=1))
        self.assertFalse(registry.locked)

    def testHandlerMustBeCallable(self):
        with self.assertRaises(TypeError):
            parse(["prog"], build(), None)


class StateTest(TestCase):

    def testCountsMatchedOccurrences(self):
        registry = build()
        parse(["prog", "-v", "--verbose", "-l", "a", "--logg", "x", "--", "y"], registry, Recorder())
        counts = {descriptor.ident: descriptor.count for descriptor in registry}
        self.assertEqual(counts, {"logging": 1, "two": 0, "verbose": 2, "files": 2})

    def testRegistryIsSealedDuringTheParse(self):
        registry = build()

        def handler(kind, descriptor, value, user):
            self.assertTrue(registry.locked)
            registry.add(OptionDescriptor("late", "z"))

        with self.assertRaises(RegistrySealedError):
            parse(["prog", "-v"], registry, handler)
        self.assertFalse(registry.locked)
        self.assertEqual(len(registry), 4)

    def testStaleTablesAreRecompiled(self):
        registry = build()
        tables = compile(registry)
        registry.add(OptionDescriptor("zeta", "z"))
        recorder = Recorder()
        parse(["prog", "-z"], registry, recorder, tables=tables)
        self.assertEqual(recorder.calls, [(EventKind.SHORT, "zeta", None)])

    def testTablesFromAnotherRegistryAreRecompiled(self):
        quiet = Registry([OptionDescriptor("a", "l")])
        loud = Registry([OptionDescriptor("b", "l", kind=ArgKind.REQUIRED)])
        self.assertEqual(quiet.revision, loud.revision)
        recorder = Recorder()
        parse(["prog", "-l", "foo"], loud, recorder, tables=compile(quiet))
        self.assertEqual(recorder.calls, [(EventKind.SHORT, "b", "foo")])

    def testEventsStream(self):
        registry = build()
        stream = events(["prog", "-l", "foo", "bar"], registry)
        first = next(stream)
        self.assertEqual(first, Event(EventKind.SHORT, registry[0], "foo", "-l"))
        self.assertTrue(registry.locked)
        stream.close()
        self.assertFalse(registry.locked)

    def testDebugLogsEvents(self):
        from sextant import dispatcher

        with mock.patch.object(dispatcher.console, "log") as log:
            parse(["prog", "-v"], build(debug=True), Recorder())
        self.assertTrue(any("SHORT" in call.args[0] for call in log.call_args_list))


class ClassifyTest(TestCase):

    def setUp(self):
        self.registry = build()
        self.tables = compile(self.registry)

    def testShortSignal(self):
        event = classify(Signal("v", token="-v"), self.registry, self.tables)
        self.assertEqual(event, Event(EventKind.SHORT, self.registry[2], None, "-v"))

    def testLongSignal(self):
        event = classify(Signal(0, "bar", 1, "--two"), self.registry, self.tables)
        self.assertEqual(event, Event(EventKind.LONG, self.registry[1], "bar", "--two"))

    def testNonOptionSignal(self):
        event = classify(Signal(1, "extra"), self.registry, self.tables)
        self.assertEqual(event, Event(EventKind.POSITIONAL, self.registry[3], "extra", "extra"))

    def testLongEntryMissingFromRegistry(self):
        tables = Tables(self.tables.shortopts, (LongOption("ghost", HasArg.NO, "ghost"),), self.registry.revision, id(self.registry))
        with self.assertRaises(InternalError):
            classify(Signal(0, None, 0, "--ghost"), self.registry, tables)

    def testShortCharacterMissingFromRegistry(self):
        with self.assertRaises(InternalError):
            classify(Signal("q", token="-q"), self.registry, self.tables)

    def testUnknownSignalCode(self):
        with self.assertRaises(InternalError):
            classify(Signal(42), self.registry, self.tables)

    def testInconsistentTablesDuringParse(self):
        registry = build()
        tables = Tables("-:q", (), registry.revision, id(registry))
        with self.assertRaises(InternalError):
            parse(["prog", "-q"], registry, Recorder(), tables=tables)
        self.assertFalse(registry.locked)

    def testInternalErrorHardExit(self):
        registry = build(hard_exit=True)
        tables = Tables("-:q", (), registry.revision, id(registry))
        with mock.patch.object(faults.console, "print"):
            with self.assertRaises(SystemExit) as context:
                parse(["prog", "-q"], registry, Recorder(), tables=tables)
        self.assertEqual(context.exception.code, 0xDEAD)


if __name__ == '__main__':
    unittest.main()
