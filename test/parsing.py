"""
Parsing behavioral tests (state machine, arities, faults, callbacks).

Scope
- Validate value collection for every arity and kind.
- Validate command selection and its one-way state change.
- Validate each parse fault and the data it carries.
- Validate callback ordering and suppression.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the embeddable entry point (get_parsed_arguments), so faults
  surface as exceptions.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argweave import (
    Continue,
    FaultCode,
    IncorrectNumberOfValuesError,
    InvalidValueOptionError,
    InvalidValueTypeError,
    MissingArgumentsError,
    Parser,
    RequestExit,
    UnknownArgumentError,
    UnknownOptionError,
)
from argweave.parsing import satisfies_nargs


class TestArities(TestCase):
    """Behavioral tests for value collection."""

    def setUp(self):
        self.parser = Parser("tool", add_version=False)

    def parse(self, prompt):
        return self.parser.get_parsed_arguments(prompt).arguments

    def testSingleValue(self):
        self.parser.add_argument(["--name"], type="string")
        self.assertEqual(self.parse("--name alice")["name"], "alice")

    def testInlineValue(self):
        self.parser.add_argument(["--name"], type="string")
        self.assertEqual(self.parse("--name=alice")["name"], "alice")

    def testExactArity(self):
        self.parser.add_argument(["--point"], type="integer", nargs=3)
        self.assertEqual(self.parse("--point 1 2 3")["point"], [1, 2, 3])

    def testExactArityTooFew(self):
        self.parser.add_argument(["--point"], type="integer", nargs=3)
        with self.assertRaises(IncorrectNumberOfValuesError) as context:
            self.parse("--point 1 2")
        self.assertEqual(context.exception.argument.key, "point")

    def testExactArityTooMany(self):
        self.parser.add_argument(["--point"], type="integer", nargs=3)
        with self.assertRaises(IncorrectNumberOfValuesError) as context:
            self.parse("--point 1 2 3 4")
        self.assertEqual(context.exception.token.content, "--point")

    def testValuesStopAtOptions(self):
        self.parser.add_argument(["--tags"], type="string", nargs="*")
        self.parser.add_argument(["--force"])
        arguments = self.parse("--tags a b --force")
        self.assertEqual(arguments["tags"], ["a", "b"])
        self.assertTrue(arguments["force"])

    def testOneOrMoreStopsAtOptions(self):
        self.parser.add_argument(["--tags"], type="string", nargs="+")
        self.parser.add_argument(["--force"])
        arguments = self.parse("--tags a b --force")
        self.assertEqual(arguments["tags"], ["a", "b"])
        self.assertTrue(arguments["force"])

    def testOneOrMore(self):
        self.parser.add_argument(["FILES"], nargs="+")
        self.assertEqual(self.parse("a b c")["FILES"], ["a", "b", "c"])
        with self.assertRaises(MissingArgumentsError):
            self.parse("")

    def testOneOrMoreOptionNeedsValue(self):
        self.parser.add_argument(["--tags"], type="string", nargs="+")
        with self.assertRaises(IncorrectNumberOfValuesError):
            self.parse("--tags")

    def testZeroOrOne(self):
        self.parser.add_argument(["--level"], type="integer", nargs="?")
        self.assertEqual(self.parse("--level")["level"], [])
        self.assertEqual(self.parse("--level 4")["level"], [4])

    def testPositionalsFillInOrder(self):
        self.parser.add_argument(["SOURCE"])
        self.parser.add_argument(["TARGET"])
        arguments = self.parse("a b")
        self.assertEqual((arguments["SOURCE"], arguments["TARGET"]), ("a", "b"))

    def testCountAccumulates(self):
        self.parser.add_argument(["-v", "--verbose"], type="count")
        self.assertEqual(self.parse("-vvv")["verbose"], 3)
        self.assertEqual(self.parse("-v --verbose")["verbose"], 2)
        self.assertEqual(self.parse("")["verbose"], 0)

    def testBooleanStoresValue(self):
        self.parser.add_argument(["--no-color"], value=False, default_value=True)
        self.assertIs(self.parse("")["no_color"], True)
        self.assertIs(self.parse("--no-color")["no_color"], False)

    def testNegativeNumberIsAValue(self):
        self.parser.add_argument(["--offset"], type="integer")
        self.assertEqual(self.parse(["--offset", "-5"])["offset"], -5)

    def testTerminatorPassesOptionsAsValues(self):
        self.parser.add_argument(["NAME"])
        self.assertEqual(self.parse(["--", "--weird"])["NAME"], "--weird")

    def testInitialStateKeptSeparately(self):
        self.parser.add_argument(["--name"], type="string", default_value="anonymous")
        result = self.parser.get_parsed_arguments("--name alice")
        self.assertEqual(result.initial_state["name"], "anonymous")
        self.assertEqual(result.arguments["name"], "alice")
        self.assertEqual([token.content for token in result.tokens], ["--name", "alice"])

    def testSatisfiesNargs(self):
        self.assertTrue(satisfies_nargs(None, 1))
        self.assertFalse(satisfies_nargs(2, 1))
        self.assertTrue(satisfies_nargs("*", 0))
        self.assertFalse(satisfies_nargs("+", 0))
        self.assertFalse(satisfies_nargs("?", 2))


class TestFaults(TestCase):
    """Behavioral tests for parse faults."""

    def setUp(self):
        self.parser = Parser("tool", add_version=False)

    def testUnknownOption(self):
        with self.assertRaises(UnknownOptionError) as context:
            self.parser.get_parsed_arguments("--nope")
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(context.exception.token.content, "--nope")

    def testUnknownArgument(self):
        with self.assertRaises(UnknownArgumentError):
            self.parser.get_parsed_arguments("stray")

    def testInvalidValueType(self):
        self.parser.add_argument(["--count"], type="integer")
        with self.assertRaises(InvalidValueTypeError) as context:
            self.parser.get_parsed_arguments("--count many")
        self.assertEqual(context.exception.invalid, ("many",))

    def testInvalidValueOption(self):
        mode = self.parser.add_argument(["--mode"], type="string")
        mode.add_value("fast")
        mode.add_value("safe")
        self.assertEqual(self.parser.get_parsed_arguments("--mode fast").arguments["mode"], "fast")
        with self.assertRaises(InvalidValueOptionError) as context:
            self.parser.get_parsed_arguments("--mode slow")
        self.assertEqual(context.exception.accepted, ("fast", "safe"))

    def testInlineValueOnFlagRejected(self):
        self.parser.add_argument(["FILE"])
        self.parser.add_argument(["--quiet"])
        self.parser.add_argument(["-c"], type="count")
        for prompt, key in (("--quiet=oops", "quiet"), ("-c=3", "c")):
            with self.subTest(prompt=prompt):
                with self.assertRaises(IncorrectNumberOfValuesError) as context:
                    self.parser.get_parsed_arguments(prompt)
                self.assertEqual(context.exception.argument.key, key)
                self.assertEqual(context.exception.token.original, prompt)

    def testInlineValueOnValueArgumentAccepted(self):
        self.parser.add_argument(["FILE"])
        self.parser.add_argument(["--name"], type="string")
        arguments = self.parser.get_parsed_arguments("--name=alice notes.txt").arguments
        self.assertEqual((arguments["name"], arguments["FILE"]), ("alice", "notes.txt"))

    def testMissingArguments(self):
        self.parser.add_argument(["FILE"])
        self.parser.add_argument(["--level"], type="integer", required=True)
        with self.assertRaises(MissingArgumentsError) as context:
            self.parser.get_parsed_arguments("")
        self.assertEqual([argument.key for argument in context.exception.missing], ["FILE", "level"])

    def testHelpSuppressesMissingArguments(self):
        self.parser.add_argument(["FILE"])
        result = self.parser.get_parsed_arguments("-h")
        self.assertIs(result.arguments["help"], True)

    def testFaultCarriesActiveCommand(self):
        install = self.parser.add_command("install")
        with self.assertRaises(UnknownOptionError) as context:
            self.parser.get_parsed_arguments("install --nope")
        self.assertIs(context.exception.command, install)

    def testFaultLabel(self):
        self.assertEqual(FaultCode.MISSING_ARGUMENTS.label, "ARGS_MISSING_ARGUMENTS")
        self.assertEqual(str(UnknownOptionError()), "ARGS_UNKNOWN_OPTION")


class TestCommands(TestCase):
    """Behavioral tests for command selection."""

    def setUp(self):
        self.parser = Parser("tool")
        self.parser.add_argument(["--force"])
        self.install = self.parser.add_command("install")
        self.install.add_argument(["PACKAGE"], nargs="+")

    def testSelectsCommand(self):
        result = self.parser.get_parsed_arguments("install a b")
        self.assertEqual(result.commands, ("install",))
        self.assertEqual(result.arguments["PACKAGE"], ["a", "b"])

    def testResultHoldsActiveCommandArguments(self):
        result = self.parser.get_parsed_arguments("install a")
        self.assertNotIn("force", result.arguments)
        self.assertIs(result.arguments["help"], False)

    def testCommandAfterArgumentIsPositional(self):
        with self.assertRaises(UnknownArgumentError):
            self.parser.get_parsed_arguments("--force install")

    def testCommandKeyInPath(self):
        self.parser.add_command("remove", key="uninstall")
        self.assertEqual(self.parser.get_parsed_arguments("remove").commands, ("uninstall",))

    def testNestedCommands(self):
        remote = self.parser.add_command("remote")
        add = remote.add_command("add")
        add.add_argument(["NAME"])
        result = self.parser.get_parsed_arguments("remote add origin")
        self.assertEqual(result.commands, ("remote", "add"))
        self.assertEqual(result.arguments["NAME"], "origin")

    def testHelpReachableFromCommand(self):
        outcome = self.parser.evaluate("install -h")
        self.assertIsInstance(outcome, RequestExit)
        self.assertEqual(outcome.code, 0)
        self.assertTrue(outcome.message.startswith("usage: tool install"))


class TestCallbacks(TestCase):
    """Behavioral tests for user and system callbacks."""

    def setUp(self):
        self.parser = Parser("tool", add_version=False)
        self.calls = []

    def record(self, name):
        def callback(value, argument):
            self.calls.append((name, value, argument.key))
        return callback

    def testPriorityThenDeclarationOrder(self):
        self.parser.add_argument(["--a"], callback=self.record("a"), priority=2)
        self.parser.add_argument(["--b"], callback=self.record("b"), priority=1)
        self.parser.add_argument(["--c"], callback=self.record("c"), priority=2)
        outcome = self.parser.evaluate("--c --a --b")
        self.assertIsInstance(outcome, Continue)
        self.assertEqual([name for name, _, _ in self.calls], ["b", "a", "c"])

    def testCallbackReceivesValue(self):
        self.parser.add_argument(["--name"], type="string", callback=self.record("name"))
        self.parser.get_parsed_arguments("--name alice")
        self.assertEqual(self.calls, [("name", "alice", "name")])

    def testUnconsumedArgumentsDoNotCallBack(self):
        self.parser.add_argument(["--a"], callback=self.record("a"))
        self.parser.evaluate("")
        self.assertEqual(self.calls, [])

    def testSystemCallbackSuppressesUserCallbacks(self):
        self.parser.add_argument(["--a"], callback=self.record("a"))
        outcome = self.parser.evaluate("--a -h")
        self.assertEqual(outcome.code, 0)
        self.assertEqual(self.calls, [])

    def testSystemCallbacksFollowTokenOrder(self):
        parser = Parser("tool", version="1.0.0")
        self.assertEqual(parser.evaluate("-v -h").message, "tool 1.0.0")
        self.assertTrue(parser.evaluate("-h -v").message.startswith("usage: tool [-h] [-v]"))

    def testHelpCallbackCanReplaceText(self):
        parser = Parser("tool", add_help=False, add_version=False)
        parser.add_argument(["--usage"], type="usage", callback=lambda value, argument: "custom help")
        self.assertEqual(parser.evaluate("--usage"), RequestExit(0, "custom help", "out"))

    def testParseLogging(self):
        self.parser.add_argument(["--name"], type="string")
        with self.assertLogs("argweave.parsing", level="DEBUG") as logs:
            self.parser.get_parsed_arguments("--name alice")
        self.assertTrue(any("alice" in line for line in logs.output))


if __name__ == '__main__':
    unittest.main()
