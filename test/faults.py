"""
Fault behavioral tests (codes, rendering, trigger semantics).

Scope
- FaultCode grouping and host normalization.
- SextantError options, copy.replace() and rich rendering.
- trigger(): raise vs. print-and-exit, settings-driven shell mode and the
  0xDEAD status of fatal faults.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase, mock

from rich.console import Console

from sextant import faults
from sextant.config import settings
from sextant.faults import *


def render(fault):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        console.print(fault)
    return capture.get()


class FaultCodeTest(TestCase):

    def testGroups(self):
        self.assertEqual(FaultCode.DUPLICATE_SHORT // 100, 131)
        self.assertEqual(FaultCode.CAPACITY_EXCEEDED // 100, 132)
        self.assertEqual(FaultCode.POSITIONAL_WITHOUT_SLOT // 100, 133)
        self.assertEqual(FaultCode.INTERNAL // 100, 134)
        self.assertEqual(FaultCode.UNKNOWN_OPTION // 100, 135)

    def testNormalizeUsesHostCodes(self):
        main = __import__("__main__")
        with mock.patch.object(main, "__codes__", {FaultCode.INTERNAL: "E-INT"}, create=True):
            self.assertEqual(FaultCode.INTERNAL.normalize(), "E-INT")
            self.assertEqual(FaultCode.DUPLICATE_LONG.normalize(), "13102")

    def testGetdoc(self):
        main = __import__("__main__")
        with mock.patch.object(main, "__docs__", {FaultCode.DUPLICATE_SHORT: "two options share -x"}, create=True):
            self.assertEqual(getdoc(FaultCode.DUPLICATE_SHORT), "two options share -x")
            self.assertIsNone(getdoc(FaultCode.DUPLICATE_LONG))
        with self.assertRaises(TypeError):
            getdoc(13101)


class SextantErrorTest(TestCase):

    def testDefaultsComeFromTheClass(self):
        fault = DuplicateShortError("short option '-l' is declared twice")
        self.assertIsInstance(fault, RegistrationError)
        self.assertEqual(fault.code, FaultCode.DUPLICATE_SHORT)
        self.assertEqual(fault.title, "duplicate short option")
        self.assertIsNone(fault.hint)
        self.assertEqual(fault.status, 0xDEAD)
        self.assertEqual(str(fault), "short option '-l' is declared twice")

    def testInputErrorsExitWithOne(self):
        self.assertEqual(UnknownOptionError("x").status, 1)
        self.assertEqual(PositionalWithoutSlotError("x").status, 1)
        self.assertEqual(InternalError("x").status, 0xDEAD)

    def testOptionsAreReadOnly(self):
        fault = UnknownOptionError("unknown option '--logg'", hint="did you mean '--logging'?")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "nope"  # type: ignore[index]

    def testReplaceMergesOptions(self):
        fault = UnknownOptionError("unknown option '--logg'", token="--logg")
        replaced = copy.replace(fault, hint="did you mean '--logging'?")
        self.assertIsNot(replaced, fault)
        self.assertIs(type(replaced), UnknownOptionError)
        self.assertEqual(replaced.message, fault.message)
        self.assertEqual(replaced.options["token"], "--logg")
        self.assertEqual(replaced.hint, "did you mean '--logging'?")

    def testRenderPlain(self):
        output = render(UnknownOptionError(
            "unknown option '--logg'",
            hint="did you mean '--logging'?",
            prog="demo",
            colorful=False,
        ))
        self.assertIn("[ demo — 13501 | Unknown Option ]", output)
        self.assertIn("unknown option '--logg'", output)
        self.assertIn("→ did you mean '--logging'?", output)

    def testRenderFancy(self):
        output = render(MissingArgumentError("option '-l' requires an argument", fancy=True, colorful=False))
        self.assertIn("Missing Argument", output)
        self.assertIn("option '-l' requires an argument", output)


class TriggerTest(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(UnknownOptionError("unknown option '-x'"), token="-x")
        self.assertEqual(context.exception.options["token"], "-x")

    def testShellPrintsAndExits(self):
        with mock.patch.object(faults.console, "print") as printer:
            with self.assertRaises(SystemExit) as context:
                trigger(UnknownOptionError("unknown option '-x'"), shell=True)
        self.assertEqual(context.exception.code, 1)
        printer.assert_called_once()

    def testHardExitSettingsDriveFatalFaults(self):
        current = settings(hard_exit=True)
        with mock.patch.object(faults.console, "print"):
            with self.assertRaises(SystemExit) as context:
                trigger(DuplicateLongError("long option '--two' is declared twice"), settings=current)
        self.assertEqual(context.exception.code, 0xDEAD)

        # user input faults follow `shell`, not `hard_exit`
        with self.assertRaises(UnknownOptionError):
            trigger(UnknownOptionError("unknown option '-x'"), settings=current)

    def testShellSettingsDriveInputFaults(self):
        current = settings(shell=True)
        with mock.patch.object(faults.console, "print"):
            with self.assertRaises(SystemExit) as context:
                trigger(MissingArgumentError("option '-l' requires an argument"), settings=current)
        self.assertEqual(context.exception.code, 1)

        with self.assertRaises(InternalError):
            trigger(InternalError("bad table"), settings=current)

    def testExplicitOptionsWinOverSettings(self):
        with self.assertRaises(InternalError):
            trigger(InternalError("bad table"), settings=settings(hard_exit=True), shell=False)

    def testRejectsNonTriggerables(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == '__main__':
    unittest.main()
