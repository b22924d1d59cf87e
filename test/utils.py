"""
Utility helpers tests (sentinel, read-only views, phrasing).

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from types import MappingProxyType
from unittest import TestCase

from argot.utils import Unset, UnsetType, coalesce, ordinal, pluralize, rename, view


class TestUnset(TestCase):
    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalseyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalescePreservesFalseyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):
    def testFunctionForm(self):
        def callback():
            pass

        self.assertIs(rename(callback, "other"), callback)
        self.assertEqual(callback.__name__, "other")
        self.assertEqual(callback.__qualname__, "other")

    def testDecoratorForm(self):
        @rename("other")
        def callback():
            pass

        self.assertEqual(callback.__name__, "other")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename()


class TestView(TestCase):
    class Holder:
        items = view("items")
        mapping = view("mapping")
        members = view("members")
        name = view("name")

        def __init__(self):
            self._items = [1, 2]
            self._mapping = {"a": 1}
            self._members = {1}
            self._name = "holder"

    def testImmutableViews(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.mapping, MappingProxyType)
        self.assertEqual(holder.members, frozenset({1}))
        self.assertEqual(holder.name, "holder")

    def testMappingViewIsLive(self):
        holder = self.Holder()
        holder._mapping["b"] = 2
        self.assertEqual(dict(holder.mapping), {"a": 1, "b": 2})
        with self.assertRaises(TypeError):
            holder.mapping["c"] = 3  # type: ignore[index]

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.Holder().name = "other"


class TestPhrasing(TestCase):
    def testPluralize(self):
        self.assertEqual(pluralize("argument", 1), "1 argument")
        self.assertEqual(pluralize("argument", 0), "0 arguments")
        self.assertEqual(pluralize("argument", 3), "3 arguments")
        self.assertEqual(pluralize("match", 2), "2 matches")

    def testOrdinalWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
