"""
CLI mode behavioral tests (writers, exit codes, parser options).

Scope
- Validate that parse_arguments writes help/version to write_out and exits 0.
- Validate that parse faults and unsplittable prompts are written to
  write_err and exit 1.
- Validate parser option checks and fault rendering helpers.

Conventions
- Test method names follow CamelCase per project convention.
- Writers are injected as list.append so nothing reaches the terminal.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase, mock

from rich.text import Text

from argweave import DeclarationError, Parser, UnknownOptionError


class TestParseArguments(TestCase):
    """Behavioral tests for the CLI entry point."""

    def setUp(self):
        self.out, self.err = [], []
        self.parser = Parser("tool", version="2.0.0", write_out=self.out.append, write_err=self.err.append)
        self.parser.add_argument(["FILE"])

    def testSuccessReturnsResult(self):
        result = self.parser.parse_arguments("notes.txt")
        self.assertEqual(result.arguments["FILE"], "notes.txt")
        self.assertEqual((self.out, self.err), ([], []))

    def testHelpExitsZero(self):
        with self.assertRaises(SystemExit) as context:
            self.parser.parse_arguments("--help")
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(len(self.out), 1)
        self.assertTrue(self.out[0].startswith("usage: tool FILE [-h] [-v]"))
        self.assertEqual(self.err, [])

    def testVersionExitsZero(self):
        with self.assertRaises(SystemExit) as context:
            self.parser.parse_arguments(["-v"])
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(self.out, ["tool 2.0.0"])

    def testFaultExitsOne(self):
        with self.assertRaises(SystemExit) as context:
            self.parser.parse_arguments("notes.txt --nope")
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(self.out, [])
        self.assertTrue(self.err[0].endswith("tool: error: Unrecognized arguments: --nope."))

    def testUnbalancedQuotesExitOne(self):
        with self.assertRaises(SystemExit) as context:
            self.parser.parse_arguments('"notes.txt')
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(self.err, [
            "usage: tool FILE [-h] [-v]\ntool: error: Malformed command line: no closing quotation."
        ])

    def testUnbalancedQuotesRaiseInEmbeddableMode(self):
        with self.assertRaises(ValueError):
            self.parser.get_parsed_arguments('"notes.txt')

    def testReadsArgvByDefault(self):
        with mock.patch.object(sys, "argv", ["tool", "notes.txt"]):
            self.assertEqual(self.parser.parse_arguments().arguments["FILE"], "notes.txt")

    def testEmbeddableModeDoesNotWrite(self):
        result = self.parser.get_parsed_arguments("--help")
        self.assertIs(result.arguments["help"], True)
        self.assertEqual((self.out, self.err), ([], []))


class TestParserOptions(TestCase):
    """Behavioral tests for Parser construction."""

    def testProgDefaultsToScriptName(self):
        with mock.patch.object(sys, "argv", ["/usr/bin/frobnicate"]):
            self.assertEqual(Parser().prog, "frobnicate")

    def testUnknownFormatOptionRejected(self):
        with self.assertRaises(DeclarationError):
            Parser("tool", format_options={"colour": True})

    def testInvalidFormatOptionRejected(self):
        with self.assertRaises(DeclarationError):
            Parser("tool", format_options={"max_width": -1})

    def testWritersMustBeCallable(self):
        with self.assertRaises(DeclarationError):
            Parser("tool", write_out="stdout")

    def testFormatOptionsAreReadOnly(self):
        parser = Parser("tool")
        with self.assertRaises(TypeError):
            parser.format_options["max_width"] = 10
        self.assertEqual(parser.format_options["max_width"], 80)
        self.assertIs(parser.format_options["prefer_long_codes"], True)

    def testUnknownLanguageRejected(self):
        with self.assertRaises(KeyError):
            Parser("tool", lang="xx-XX")


class TestFaultRendering(TestCase):
    """Behavioral tests for the fault helpers."""

    def testRichRendering(self):
        text = UnknownOptionError().__rich__()
        self.assertIsInstance(text, Text)
        self.assertEqual(text.plain, "ARGS_UNKNOWN_OPTION: ")

    def testMessageKept(self):
        fault = UnknownOptionError("no such option")
        self.assertEqual(str(fault), "no such option")
        self.assertEqual(fault.__rich__().plain, "ARGS_UNKNOWN_OPTION: no such option")

    def testMissingOptionAttribute(self):
        with self.assertRaises(AttributeError):
            UnknownOptionError().token


if __name__ == '__main__':
    unittest.main()
