# python
"""
Matcher module behavioral tests (token walking and parse errors).

Scope
- Validate how tokens are split between named and positional matches.
- Validate mode boundaries: Fixed fills up, Variable stops at its maximum or
  at the next option, OneOrMore and Fixed report missing values.
- Validate every parse error and the position it reports.

Conventions
- Test method names follow CamelCase per project convention.
- The matcher is driven directly; parse errors are raised, not returned.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argweave import ArgumentParser, OneOrMore
from argweave.faults import (
    FaultCode,
    UnknownOptionError,
    DuplicatedOptionError,
    TooManyPositionalsError,
    NotEnoughValuesError,
    AtLeastOneValueRequiredError,
    MissingPositionalsError,
)
from argweave.matcher import State, TokenMatcher
from argweave.registry import NameRegistry


def matcher(parser):
    return TokenMatcher(NameRegistry.build(list(parser.definitions)))


def summary(matches):
    return [(match.definition.label, match.values) for match in matches]


class TestMatching(TestCase):
    """Behavioral tests for successful matches."""

    def testPositionalsThenOption(self):
        parser = ArgumentParser("tool")
        parser.add_argument("a")
        parser.add_argument("b")
        parser.add_argument("count").add_name("--count")
        matches = matcher(parser).match(["x", "y", "--count", "5"])
        self.assertEqual(summary(matches), [("a", ["x"]), ("b", ["y"]), ("count", ["5"])])

    def testMatchRecordsInvokingName(self):
        parser = ArgumentParser("tool")
        parser.add_argument("count").add_name("-c").add_name("--count")
        parser.add_argument("source")
        matches = matcher(parser).match(["-c", "3", "file"])
        self.assertEqual(matches[0].name, "-c")
        self.assertEqual(matches[0].index, 1)
        self.assertEqual(matches[1].name, "source")
        self.assertEqual(matches[1].index, 3)

    def testFixedFillsThenHandsOverToPositional(self):
        parser = ArgumentParser("tool")
        parser.add_argument("pair").add_name("--pair").set_nargs(2)
        parser.add_argument("rest")
        matches = matcher(parser).match(["--pair", "a", "b", "c"])
        self.assertEqual(summary(matches), [("pair", ["a", "b"]), ("rest", ["c"])])

    def testVariableFollowedByOptionTakesNothing(self):
        parser = ArgumentParser("tool")
        parser.add_argument("exclude").add_name("--exclude").set_nargs(-3)
        parser.add_argument("verbose").add_name("--verbose").set_nargs(0)
        matches = matcher(parser).match(["--exclude", "--verbose"])
        self.assertEqual(summary(matches), [("exclude", []), ("verbose", [])])

    def testVariableStopsAtMaximum(self):
        parser = ArgumentParser("tool")
        parser.add_argument("exclude").add_name("--exclude").set_nargs(-3)
        parser.add_argument("rest")
        matches = matcher(parser).match(["--exclude", "a", "b", "c", "d"])
        self.assertEqual(summary(matches), [("exclude", ["a", "b", "c"]), ("rest", ["d"])])

    def testVariableAtEndOfInput(self):
        parser = ArgumentParser("tool")
        parser.add_argument("exclude").add_name("--exclude").set_nargs(-3)
        matches = matcher(parser).match(["--exclude", "a"])
        self.assertEqual(summary(matches), [("exclude", ["a"])])

    def testOneOrMorePositionalIsGreedyUntilOption(self):
        parser = ArgumentParser("tool")
        parser.add_argument("files").set_multi_value_mode(OneOrMore())
        parser.add_argument("verbose").add_name("-v").set_nargs(0)
        matches = matcher(parser).match(["a", "b", "c", "-v"])
        self.assertEqual(summary(matches), [("files", ["a", "b", "c"]), ("verbose", [])])

    def testZeroValueSwitchHandsOverImmediately(self):
        parser = ArgumentParser("tool")
        parser.add_argument("verbose").add_name("-v").set_nargs(0)
        parser.add_argument("source")
        matches = matcher(parser).match(["-v", "file"])
        self.assertEqual(summary(matches), [("verbose", []), ("source", ["file"])])

    def testTokensOutsideGrammarArePositional(self):
        parser = ArgumentParser("tool")
        parser.add_argument("a")
        parser.add_argument("b")
        matches = matcher(parser).match(["-abc", "-"])
        self.assertEqual(summary(matches), [("a", ["-abc"]), ("b", ["-"])])

    def testOptionalPositionalMayBeAbsent(self):
        parser = ArgumentParser("tool")
        parser.add_argument("source")
        parser.add_argument("dest").set_optional()
        matches = matcher(parser).match(["file"])
        self.assertEqual(summary(matches), [("source", ["file"])])

    def testEmptyInput(self):
        parser = ArgumentParser("tool")
        self.assertEqual(matcher(parser).match([]), [])

    def testStateIsDoneAfterMatching(self):
        parser = ArgumentParser("tool")
        parser.add_argument("a")
        instance = matcher(parser)
        instance.match(["x"])
        self.assertIs(instance.state, State.DONE)

    def testMatcherIsReusable(self):
        parser = ArgumentParser("tool")
        parser.add_argument("a")
        instance = matcher(parser)
        self.assertEqual(summary(instance.match(["x"])), [("a", ["x"])])
        self.assertEqual(summary(instance.match(["y"])), [("a", ["y"])])


class TestParseErrors(TestCase):
    """Behavioral tests for parse errors raised by the matcher."""

    def testUnknownOption(self):
        parser = ArgumentParser("tool")
        with self.assertRaises(UnknownOptionError) as context:
            matcher(parser).match(["--bogus"])
        self.assertEqual(str(context.exception), 'found unrecognized option "--bogus" at first position')
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_OPTION)

    def testUnknownOptionSuggestsCloseMatch(self):
        parser = ArgumentParser("tool")
        parser.add_argument("bogus").add_name("--bogus-mode").set_nargs(0)
        with self.assertRaises(UnknownOptionError) as context:
            matcher(parser).match(["--bogus"])
        self.assertIn("--bogus-mode", context.exception.hint)
        self.assertIn("--bogus-mode", context.exception.options["suggestions"])

    def testUnknownOptionClosesOpenMatch(self):
        parser = ArgumentParser("tool")
        parser.add_argument("exclude").add_name("--exclude").set_nargs(-3)
        with self.assertRaises(UnknownOptionError) as context:
            matcher(parser).match(["--exclude", "a", "--nope"])
        self.assertIn("third position", str(context.exception))

    def testDuplicatedOption(self):
        parser = ArgumentParser("tool")
        parser.add_argument("count").add_name("-c").add_name("--count")
        with self.assertRaises(DuplicatedOptionError) as context:
            matcher(parser).match(["-c", "1", "--count", "2"])
        self.assertEqual(str(context.exception), 'option "--count" at third position was already provided')

    def testTooManyPositionals(self):
        parser = ArgumentParser("tool")
        parser.add_argument("a")
        with self.assertRaises(TooManyPositionalsError) as context:
            matcher(parser).match(["x", "y"])
        self.assertIn("too many positional arguments", str(context.exception))
        self.assertIn("second position", str(context.exception))

    def testNotEnoughValuesAtEndOfInput(self):
        parser = ArgumentParser("tool")
        parser.add_argument("count").add_name("--count")
        with self.assertRaises(NotEnoughValuesError) as context:
            matcher(parser).match(["--count"])
        self.assertEqual(
            str(context.exception),
            'argument "--count" at first position expects 1 values but only 0 were provided',
        )

    def testNotEnoughValuesBeforeNextOption(self):
        parser = ArgumentParser("tool")
        parser.add_argument("pair").add_name("--pair").set_nargs(2)
        parser.add_argument("verbose").add_name("-v").set_nargs(0)
        with self.assertRaises(NotEnoughValuesError) as context:
            matcher(parser).match(["--pair", "a", "-v"])
        self.assertIn("expects 2 values but only 1 were provided", str(context.exception))

    def testOneOrMoreWithoutValues(self):
        parser = ArgumentParser("tool")
        parser.add_argument("files").add_name("--files").set_nargs(0, True)
        with self.assertRaises(AtLeastOneValueRequiredError):
            matcher(parser).match(["--files"])

    def testMissingRequiredPositionals(self):
        parser = ArgumentParser("tool")
        parser.add_argument("a")
        parser.add_argument("b")
        parser.add_argument("c").set_optional()
        with self.assertRaises(MissingPositionalsError) as context:
            matcher(parser).match(["x"])
        self.assertEqual(context.exception.options["missing"], ("b",))
        self.assertIn("<b>", str(context.exception))


if __name__ == "__main__":
    unittest.main()
