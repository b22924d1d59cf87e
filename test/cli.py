"""
CLI bootstrap tests (execute, global options, shell mode, invoke).

Scope
- Validate execution results and how output is handed back.
- Validate --help/--version as exit requests that bypass argument validation.
- Validate container nodes, missing declarations and shell-mode exits.
- Validate invoke() prompt handling.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (create_cli, invoke).
"""

import io
import unittest
import warnings
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from argot import create_cli, invoke
from argot.faults import (
    CommandExit,
    ConfigurationError,
    EmptyOptionValueWarning,
    ExitRequest,
    FaultCode,
    MissingArgumentError,
    NotACommandError,
)


def commit(options, *paths):
    return {"options": options, "paths": paths}


def add(options, name, url):
    return f"{name} -> {url}"


CONFIG = {
    "description": "Distributed version control system",
    "subcommands": {
        "commit": {
            "command": commit,
            "args": "[paths...]",
            "options": {"message": "-m, --message <text>", "amend": "--amend", "author": "--author [name]"},
        },
        "remote": {
            "subcommands": {
                "add": {"command": add, "args": "<name> <url>"},
            },
        },
    },
}


class TestExecute(TestCase):
    def setUp(self):
        self.cli = create_cli("git", cli=CONFIG, version="2.43.0", shell=False)

    def testRunsTheResolvedCommand(self):
        execution = self.cli.execute(["commit", "-m", "initial", "README.md"])
        self.assertEqual(execution.output, {"options": {"message": "initial"}, "paths": ("README.md",)})
        self.assertEqual(execution.invocation.command.route, "git commit")

    def testReadsSysArgvByDefault(self):
        with patch("sys.argv", ["git", "remote", "add", "origin", "url"]):
            self.assertEqual(self.cli.execute().output, "origin -> url")

    def testOutputIsUntouched(self):
        async def fetch(options):
            return "done"

        cli = create_cli("tool", cli={"command": fetch}, shell=False)
        output = cli.execute([]).output
        try:
            self.assertTrue(hasattr(output, "__await__"))
        finally:
            output.close()

    def testVersion(self):
        with self.assertRaises(ExitRequest) as context:
            self.cli.execute(["--version"])
        self.assertEqual(context.exception.message, "2.43.0")
        self.assertEqual(context.exception.exitcode, 0)

    def testVersionNeedsAVersion(self):
        cli = create_cli("git", cli=CONFIG, shell=False)
        with self.assertRaises(CommandExit):
            cli.execute(["--version"])

    def testHelpSkipsArgumentValidation(self):
        with self.assertRaises(ExitRequest) as context:
            self.cli.execute(["remote", "add", "--help"])
        self.assertTrue(context.exception.message.startswith("Usage: git remote add <name> <url>"))
        self.assertIs(context.exception.code, FaultCode.EXIT_REQUEST)

    def testContainerIsNotACommand(self):
        with self.assertRaises(NotACommandError) as context:
            self.cli.execute(["remote"])
        self.assertIn('"$ git remote" isn\'t a command.', context.exception.message)
        self.assertIn("Usage: git remote COMMAND", context.exception.message)

    def testFaultsAreRaised(self):
        with self.assertRaises(MissingArgumentError):
            self.cli.execute(["remote", "add", "origin"])

    def testMissingDeclaration(self):
        cli = create_cli("tool", shell=False)
        with self.assertRaises(ConfigurationError) as context:
            cli.execute([])
        self.assertIn("Define the 'cli' config", context.exception.message)

    def testInvalidDeclarationFailsFast(self):
        with self.assertRaises(ConfigurationError):
            create_cli("tool", cli={"args": "<x>"})

    def testRejectsBadNames(self):
        with self.assertRaises(TypeError):
            create_cli("", cli=CONFIG)


class TestShellMode(TestCase):
    def setUp(self):
        self.console = Console(file=io.StringIO(), width=120, color_system=None)

    def testFaultsExitWithTheirCode(self):
        cli = create_cli("git", cli=CONFIG, shell=True, colorful=False)
        with patch("argot.faults.console", self.console):
            with self.assertRaises(SystemExit) as context:
                cli.execute(["commit", "--nope"])
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Unknown option --nope", self.console.file.getvalue())

    def testHelpExitsWithZero(self):
        cli = create_cli("git", cli=CONFIG, shell=True)
        with patch("argot.faults.Console", return_value=self.console):
            with self.assertRaises(SystemExit) as context:
                cli.execute(["--help"])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Usage: git COMMAND", self.console.file.getvalue())

    def testWarningsArePrintedInShell(self):
        cli = create_cli("git", cli=CONFIG, shell=True, colorful=False)
        with patch("argot.faults.console", self.console), warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            execution = cli.execute(["commit", "--author="])

        self.assertEqual(caught, [])
        self.assertEqual(execution.output["options"], {"author": None})
        output = self.console.file.getvalue()
        self.assertIn("Empty Option Value", output)
        self.assertIn("Empty value for option --author.", output)

    def testWarningsGoThroughWarningsOutsideShell(self):
        cli = create_cli("git", cli=CONFIG, shell=False)
        with patch("argot.faults.console", self.console), self.assertWarns(EmptyOptionValueWarning):
            cli.execute(["commit", "--author="])
        self.assertEqual(self.console.file.getvalue(), "")

    def testSuccessReturnsNormally(self):
        cli = create_cli("git", cli=CONFIG, shell=True)
        self.assertEqual(cli.execute(["remote", "add", "a", "b"]).output, "a -> b")


class TestInterfaces(TestCase):
    def testTestInterfaceReturnsOutput(self):
        run = create_cli("git", cli=CONFIG, shell=True).create_test_interface()
        self.assertEqual(run("remote", "add", "origin", "url"), "origin -> url")
        with self.assertRaises(MissingArgumentError):
            run("remote", "add")
        with self.assertWarns(EmptyOptionValueWarning):
            run("commit", "--author=")

    def testApi(self):
        api = create_cli("git", cli=CONFIG, shell=False).create_api()
        self.assertEqual(api.remote.add("a", "b"), "a -> b")

    def testInvokeWithString(self):
        cli = create_cli("git", cli=CONFIG, shell=False)
        execution = invoke(cli, "commit -m 'first commit' --amend")
        self.assertEqual(execution.output["options"], {"message": "first commit", "amend": True})

    def testInvokeWithIterable(self):
        cli = create_cli("git", cli=CONFIG, shell=False)
        self.assertEqual(invoke(cli, ("remote", "add", "a", "b")).output, "a -> b")

    def testInvokeRejectsBadPrompts(self):
        cli = create_cli("git", cli=CONFIG, shell=False)
        with self.assertRaises(TypeError):
            invoke(cli, 42)
        with self.assertRaises(TypeError):
            invoke(cli, ["remote", 1])
        with self.assertRaises(TypeError):
            invoke(object(), "x")


if __name__ == "__main__":
    unittest.main()
