"""
Handlers module behavioral tests.

Scope
- Validate SetFlag/SetString/AppendList against attribute and mapping contexts.
- Validate Custom adaptation, equality and representation.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import SimpleNamespace
from unittest import TestCase

from tabopt import Handler, SetFlag, SetString, AppendList, Custom


class TestStoringHandlers(TestCase):
    """Behavioral tests for the context-storing variants."""

    def testSetFlagOnNamespace(self):
        context = SimpleNamespace(verbose=False)
        SetFlag("verbose")(context, "")
        self.assertIs(context.verbose, True)

    def testSetFlagIgnoresValue(self):
        context = {}
        SetFlag("verbose")(context, "ignored")
        self.assertEqual(context, {"verbose": True})

    def testSetStringOverwrites(self):
        context = SimpleNamespace(output="-")
        SetString("output")(context, "out.txt")
        self.assertEqual(context.output, "out.txt")

    def testAppendListCreatesThenAppends(self):
        context = SimpleNamespace()
        handler = AppendList("files")
        handler(context, "a")
        handler(context, "b")
        self.assertEqual(context.files, ["a", "b"])

    def testAppendListOnMapping(self):
        context = {"files": ["x"]}
        AppendList("files")(context, "y")
        self.assertEqual(context["files"], ["x", "y"])

    def testNameValidation(self):
        with self.assertRaises(ValueError):
            SetFlag("")
        with self.assertRaises(TypeError):
            SetString(1)

    def testEqualityAndRepr(self):
        self.assertEqual(SetFlag("a"), SetFlag("a"))
        self.assertNotEqual(SetFlag("a"), SetString("a"))
        self.assertEqual(hash(AppendList("a")), hash(AppendList("a")))
        self.assertEqual(repr(SetString("output")), "SetString('output')")
        self.assertEqual(SetFlag("a").name, "a")


class TestCustom(TestCase):
    """Behavioral tests for Custom."""

    def testForwardsValueOnly(self):
        received = []
        Custom(received.append)(object(), "v")
        self.assertEqual(received, ["v"])

    def testExceptionsPropagate(self):
        with self.assertRaises(ValueError):
            Custom(int)(None, "x")

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            Custom("nope")

    def testIsAHandler(self):
        self.assertIsInstance(Custom(print), Handler)
        self.assertIsInstance(SetFlag("a"), Handler)

    def testHandlerIsAbstract(self):
        with self.assertRaises(TypeError):
            Handler()


if __name__ == "__main__":
    unittest.main()
