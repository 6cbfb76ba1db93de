"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel: singleton identity, falsy semantics, representation,
  copying, pickling and finality.
- coalesce(): only Unset is replaced.
- mirror(): read-only properties over private fields.
- dashed(): command-line spelling of option names.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from rich.console import Console

from sextant.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), UnsetType())
        self.assertIs(Unset, UnsetType())

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testRichConsolePrint(self) -> None:
        """
        Console.print(...) renders 'Unset' without ANSI when color is disabled.
        """
        console = Console(color_system=None, force_terminal=False)
        with console.capture() as capture:
            console.print(Unset)
        self.assertEqual(capture.get().strip(), "Unset")

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 8)
        for instance in results:
            self.assertIs(instance, Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce(), mirror() and dashed().
    """

    def testCoalesceReplacesOnlyUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testMirrorIsReadOnly(self) -> None:
        class Point:
            x = mirror("x")

            def __init__(self):
                self._x = 3

        point = Point()
        self.assertEqual(point.x, 3)
        with self.assertRaises(AttributeError):
            point.x = 4

    def testMirrorRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)

    def testDashed(self) -> None:
        self.assertEqual(dashed(short="l"), "-l")
        self.assertEqual(dashed(long="logging"), "--logging")
        self.assertEqual(dashed(short="l", long="logging"), "-l")
        self.assertEqual(dashed(), "")


if __name__ == '__main__':
    unittest.main()
