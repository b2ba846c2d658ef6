# python
"""
Faults module behavioral tests (codes, replacement, trigger, rendering).

Scope
- Validate fault code normalization and host overrides through __main__.
- Validate copy.replace support and trigger() in raising and shell modes.
- Validate plain and fancy rich rendering.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.panel import Panel

from argweave.faults import (
    FaultCode,
    Fault,
    ConfigurationError,
    ParseError,
    DuplicatedNameError,
    UnknownOptionError,
    trigger,
)


def render(renderable):
    console = Console(file=io.StringIO(), width=120, color_system=None, highlight=False)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testTiers(self):
        self.assertTrue(all(code.value // 10000 == 1 for code in (
            FaultCode.UNKNOWN_OPTION,
            FaultCode.DUPLICATED_OPTION,
            FaultCode.TOO_MANY_POSITIONALS,
            FaultCode.NOT_ENOUGH_VALUES,
            FaultCode.AT_LEAST_ONE_VALUE_REQUIRED,
            FaultCode.MISSING_POSITIONALS,
        )))
        self.assertEqual(FaultCode.POSITIONAL_ORDER.value // 10000, 2)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")

    def testNormalizeHonoursHostCodes(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")


class TestFault(TestCase):
    """Behavioral tests for Fault objects."""

    def setUp(self):
        self.fault = UnknownOptionError(
            'found unrecognized option "--bogus" at first position',
            code=FaultCode.UNKNOWN_OPTION,
            title="unknown option",
            hint="did you mean '--bogus-mode'?",
        )

    def testHierarchy(self):
        self.assertIsInstance(self.fault, ParseError)
        self.assertIsInstance(self.fault, Fault)
        self.assertIsInstance(DuplicatedNameError("x"), ConfigurationError)
        self.assertNotIsInstance(self.fault, ConfigurationError)

    def testMessageAndOptions(self):
        self.assertEqual(str(self.fault), 'found unrecognized option "--bogus" at first position')
        self.assertIs(self.fault.code, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(self.fault.hint, "did you mean '--bogus-mode'?")
        with self.assertRaises(TypeError):
            self.fault.options["code"] = 0

    def testReplaceMergesOptions(self):
        replaced = copy.replace(self.fault, prog="tool")
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(str(replaced), str(self.fault))
        self.assertEqual(replaced.options["prog"], "tool")
        self.assertIs(replaced.code, FaultCode.UNKNOWN_OPTION)
        self.assertNotIn("prog", self.fault.options)

    def testTriggerRaisesWithOptions(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(self.fault, prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")

    def testTriggerRejectsForeignObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))

    def testTriggerInShellExitsWithStatus(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(self.fault, shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("--bogus", stderr.getvalue())

    def testConfigurationErrorInShellExitsWithTwo(self):
        fault = DuplicatedNameError('multiple arguments with the name "-v"', code=FaultCode.DUPLICATED_NAME)
        with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as context:
            trigger(fault, shell=True, colorful=False)
        self.assertEqual(context.exception.code, 2)

    def testPlainRendering(self):
        output = render(copy.replace(self.fault, colorful=False, prog="tool"))
        self.assertIn("[ tool — 11112 | Unknown Option ]", output)
        self.assertIn('found unrecognized option "--bogus" at first position', output)
        self.assertIn("→ did you mean '--bogus-mode'?", output)

    def testRenderingWithoutCode(self):
        output = render(ParseError("something broke", colorful=False))
        self.assertIn("? | Parseerror", output)

    def testMissingMessageIsEmptyText(self):
        self.assertEqual(str(ParseError()), "")
        self.assertEqual(str(ParseError("")), "")

    def testFancyRenderingIsAPanel(self):
        self.assertIsInstance(copy.replace(self.fault, fancy=True).__rich__(), Panel)


if __name__ == "__main__":
    unittest.main()
