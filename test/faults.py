"""
Faults module tests (codes, kinds, rendering, triggering).

Scope
- Validate that fault codes map to the right kind and that kindof() treats
  foreign exceptions as unknown.
- Validate trigger() in both shell and non-shell modes.
- Validate that rich rendering honours colorful/fancy and carries code, title and hint.

Conventions
- Test method names follow CamelCase per project convention.
"""

import copy
import io
import unittest
from unittest import TestCase

from rich.console import Console

from argot.faults import (
    CommandExit,
    EmptyOptionValueWarning,
    ExitRequest,
    FaultCode,
    FaultKind,
    MissingArgumentError,
    UnknownOptionError,
    UsageSyntaxError,
    kindof,
    trigger,
)


def _capture():
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestFaultCodes(TestCase):
    def testKindFromCodeRange(self):
        self.assertIs(FaultCode.MALFORMED_FLAG.kind, FaultKind.GRAMMAR)
        self.assertIs(FaultCode.REDEFINED_FLAG.kind, FaultKind.CONFIGURATION)
        self.assertIs(FaultCode.UNKNOWN_OPTION.kind, FaultKind.FLAG)
        self.assertIs(FaultCode.MISSING_ARGUMENT.kind, FaultKind.ARGUMENT)
        self.assertIs(FaultCode.NOT_A_COMMAND.kind, FaultKind.ROUTING)
        self.assertIs(FaultCode.EXIT_REQUEST.kind, FaultKind.EXIT)
        self.assertIs(FaultCode.EMPTY_OPTION_VALUE.kind, FaultKind.WARNING)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11301")

    def testCodesAreUnique(self):
        values = [code.value for code in FaultCode]
        self.assertEqual(len(values), len(set(values)))


class TestKindOf(TestCase):
    def testFaults(self):
        self.assertIs(kindof(UsageSyntaxError("x", code=FaultCode.UNEXPECTED_TOKEN)), FaultKind.GRAMMAR)
        self.assertIs(kindof(EmptyOptionValueWarning("x")), FaultKind.WARNING)

    def testFaultWithoutCodeIsUnknown(self):
        self.assertIs(kindof(MissingArgumentError("x")), FaultKind.UNKNOWN)

    def testForeignExceptionIsUnknown(self):
        self.assertIs(kindof(ValueError("x")), FaultKind.UNKNOWN)

    def testGroupKind(self):
        group = CommandExit([
            UnknownOptionError("a", code=FaultCode.UNKNOWN_OPTION),
            UnknownOptionError("b", code=FaultCode.UNKNOWN_OPTION),
        ])
        self.assertIs(kindof(group), FaultKind.FLAG)

        mixed = CommandExit([
            UnknownOptionError("a", code=FaultCode.UNKNOWN_OPTION),
            MissingArgumentError("b", code=FaultCode.MISSING_ARGUMENT),
        ])
        self.assertIs(kindof(mixed), FaultKind.UNKNOWN)


class TestTrigger(TestCase):
    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(UnknownOptionError("Unknown option --x.", code=FaultCode.UNKNOWN_OPTION, flag="--x"))
        self.assertEqual(context.exception.options["flag"], "--x")

    def testMergesRuntimeOptions(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(UnknownOptionError("x"), prog="git", fancy=True)
        self.assertEqual(context.exception.options["prog"], "git")
        self.assertTrue(context.exception.options["fancy"])

    def testPrintsAndExitsInShell(self):
        console = _capture()
        fault = UnknownOptionError(
            "Unknown option --x.",
            code=FaultCode.UNKNOWN_OPTION,
            title="unknown option",
            hint="try 'git --help'",
        )
        with self.assertRaises(SystemExit) as context:
            trigger(fault, shell=True, prog="git", console=console)
        self.assertEqual(context.exception.code, 1)

        output = console.file.getvalue()
        self.assertIn("git", output)
        self.assertIn("11301", output)
        self.assertIn("Unknown Option", output)
        self.assertIn("Unknown option --x.", output)
        self.assertIn("try 'git --help'", output)

    def testExitRequestExitsWithZero(self):
        stdout = _capture()
        with self.assertRaises(SystemExit) as context:
            trigger(ExitRequest("1.2.3", code=FaultCode.EXIT_REQUEST), shell=True, stdout=stdout)
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(stdout.file.getvalue().strip(), "1.2.3")

    def testGroupRendersEveryFault(self):
        console = _capture()
        group = CommandExit([
            UnknownOptionError("Unknown option --a.", code=FaultCode.UNKNOWN_OPTION),
            UnknownOptionError("Unknown option --b.", code=FaultCode.UNKNOWN_OPTION),
        ])
        with self.assertRaises(SystemExit):
            trigger(group, shell=True, console=console, fancy=True)

        output = console.file.getvalue()
        self.assertIn("--a", output)
        self.assertIn("--b", output)

    def testWarningGoesThroughWarnings(self):
        with self.assertWarns(EmptyOptionValueWarning):
            trigger(EmptyOptionValueWarning("Empty value for option --org.", stacklevel=1))

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


class TestReplace(TestCase):
    def testReplaceKeepsMessageAndType(self):
        fault = MissingArgumentError("missing", code=FaultCode.MISSING_ARGUMENT)
        replaced = copy.replace(fault, colorful=False)
        self.assertIsInstance(replaced, MissingArgumentError)
        self.assertEqual(replaced.message, "missing")
        self.assertIs(replaced.code, FaultCode.MISSING_ARGUMENT)
        self.assertFalse(replaced.options["colorful"])

    def testUsageSyntaxErrorIsASyntaxError(self):
        with self.assertRaises(SyntaxError) as context:
            raise UsageSyntaxError("bad usage", code=FaultCode.UNEXPECTED_TOKEN)
        self.assertEqual(context.exception.msg, "bad usage")
        self.assertEqual(str(context.exception), "bad usage")

        replaced = copy.replace(context.exception, colorful=False)
        self.assertIsInstance(replaced, SyntaxError)
        self.assertEqual(replaced.msg, "bad usage")


if __name__ == "__main__":
    unittest.main()
