"""
Token helper tests (name/value extraction).

Scope
- name(): short/long prefixes, '=' handling, non-option tokens and the
  two-character '--' edge case.
- value(): text after the first '=', empty when missing.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from typeflag import name, value


class TestName(TestCase):
    """Behavioral tests for option name extraction."""

    def testLongFlag(self):
        self.assertEqual(name("--verbose"), "verbose")

    def testShortFlag(self):
        self.assertEqual(name("-v"), "v")

    def testLongOptionWithValue(self):
        self.assertEqual(name("--path=path.yaml"), "path")

    def testShortOptionWithValue(self):
        self.assertEqual(name("-p=path.yaml"), "p")

    def testHyphenatedName(self):
        self.assertEqual(name("--long-var=hello"), "long-var")

    def testNameStopsAtFirstEquals(self):
        self.assertEqual(name("--define=key=value"), "define")

    def testShortTokensHaveNoName(self):
        for token in ("", "-", "v", "="):
            with self.subTest(token=token):
                self.assertEqual(name(token), "")

    def testTokensWithoutDashHaveNoName(self):
        for token in ("verbose", "path=data.yaml", "+v", "v-"):
            with self.subTest(token=token):
                self.assertEqual(name(token), "")

    def testThreeCharacterLongPrefix(self):
        self.assertEqual(name("--p"), "p")

    def testDoubleDashAloneHasNoName(self):
        self.assertEqual(name("--"), "")

    def testEqualsRightAfterPrefix(self):
        self.assertEqual(name("-="), "")
        self.assertEqual(name("--=x"), "")

    def testSingleDashLongName(self):
        self.assertEqual(name("-verbose"), "verbose")


class TestValue(TestCase):
    """Behavioral tests for raw value extraction."""

    def testLongOption(self):
        self.assertEqual(value("--path=data.yaml"), "data.yaml")

    def testShortOption(self):
        self.assertEqual(value("-n=5"), "5")

    def testFlagHasNoValue(self):
        self.assertEqual(value("-v"), "")
        self.assertEqual(value("--verbose"), "")

    def testTrailingEqualsHasNoValue(self):
        self.assertEqual(value("-n="), "")

    def testValueKeepsLaterEquals(self):
        self.assertEqual(value("--define=key=value"), "key=value")

    def testValueIsVerbatim(self):
        self.assertEqual(value("--name= spaced out "), " spaced out ")


if __name__ == "__main__":
    unittest.main()
