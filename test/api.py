"""
Programmatic API tests (calls, flag keywords, subcommand access).

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from argot.api import CommandApi, create_api
from argot.commands import normalize_commands


def record(options, *args):
    return options, args


def git():
    return normalize_commands({
        "subcommands": {
            "commit": {
                "command": record,
                "args": "[paths...]",
                "options": {
                    "message": "-m, --message <text>",
                    "dry": "--dry-run",
                },
            },
            "cherry-pick": {"command": lambda options, commit: commit, "args": "<commit>"},
            "remote": {"subcommands": {"add": {"command": record, "args": "<name> <url>"}}},
        },
    }, name="git")


class TestCreateApi(TestCase):
    def testReturnsTheCommandValue(self):
        api = create_api(normalize_commands({"command": lambda options: 5}))
        self.assertEqual(api(), 5)

    def testPassesArgumentsThrough(self):
        api = create_api(git())
        self.assertEqual(api.commit("a", "b"), ({}, ("a", "b")))

    def testMapsFlagKeywordsToOptionNames(self):
        api = create_api(git())
        self.assertEqual(api.commit(message="initial"), ({"message": "initial"}, ()))
        self.assertEqual(api.commit(m="initial"), ({"message": "initial"}, ()))
        self.assertEqual(api.commit(dry_run=True), ({"dry": True}, ()))

    def testRejectsUnknownKeywords(self):
        api = create_api(git())
        with self.assertRaises(TypeError):
            api.commit(dry=True)

    def testContainersAreNotCallable(self):
        api = create_api(git())
        with self.assertRaises(TypeError):
            api()
        with self.assertRaises(TypeError):
            api.remote()

    def testSubcommandAccess(self):
        api = create_api(git())
        self.assertIsInstance(api.remote, CommandApi)
        self.assertEqual(api.remote.add("origin", "url"), ({}, ("origin", "url")))
        self.assertEqual(api["cherry-pick"]("a1b2c3"), "a1b2c3")
        self.assertEqual(api.cherry_pick("a1b2c3"), "a1b2c3")
        self.assertIn("commit", api)
        self.assertEqual(sorted(api), ["cherry-pick", "commit", "remote"])

    def testSubcommandsNamedLikeAttributes(self):
        api = create_api(normalize_commands({
            "subcommands": {
                "tree": {"command": lambda options: "tree"},
                "route": {"command": lambda options: "route"},
            },
        }, name="git"))
        self.assertEqual(api.tree(), "tree")
        self.assertEqual(api.route(), "route")

    def testMissingSubcommand(self):
        api = create_api(git())
        with self.assertRaises(AttributeError):
            api.push
        with self.assertRaises(KeyError):
            api["push"]


if __name__ == "__main__":
    unittest.main()
