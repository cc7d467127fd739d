"""
Fault tests (codes, rendering, trigger/fatal/guard).

Scope
- FaultCode normalization through the host's __codes__ mapping.
- ParseError rendering with rich (plain and fancy, colorful or not).
- trigger(): raise outside shell mode, print and exit inside it.
- fatal()/guard(): the single place where a parse fault ends the process.

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured by swapping the module console for a recording one.
"""
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from typeflag import faults
from typeflag import (
    FaultCode,
    ParseError,
    InvalidDigitError,
    MissingValueError,
    SchemaError,
    fatal,
    getdoc,
    guard,
    parse_arg,
    trigger,
    u32,
)


def _fault():
    return InvalidDigitError(
        "count: expected an integer value, but found 'abc' (invalid digit)",
        title="invalid integer",
        code=FaultCode.INVALID_DIGIT,
        hint="use only decimal digits",
        input="count",
        value="abc",
    )


class RecordingTestCase(TestCase):

    def setUp(self) -> None:
        self.stream = io.StringIO()
        recorder = Console(file=self.stream, color_system=None, force_terminal=False, width=100)
        patcher = mock.patch.object(faults, "console", recorder)
        patcher.start()
        self.addCleanup(patcher.stop)
        main = mock.patch.object(sys.modules["__main__"], "__prog__", "tool", create=True)
        main.start()
        self.addCleanup(main.stop)


class TestFaultCode(TestCase):

    def testNormalizeDefaultsToNumber(self) -> None:
        self.assertEqual(FaultCode.INVALID_DIGIT.normalize(), "11127")

    def testNormalizeUsesHostCodes(self) -> None:
        codes = {FaultCode.INVALID_DIGIT: "E-DIGIT"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.INVALID_DIGIT.normalize(), "E-DIGIT")
            self.assertEqual(FaultCode.INVALID_CHOICE.normalize(), "11124")

    def testGetdoc(self) -> None:
        self.assertIsNone(getdoc(FaultCode.EMPTY_VALUE))
        docs = {FaultCode.EMPTY_VALUE: "values cannot be empty"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.EMPTY_VALUE), "values cannot be empty")

    def testGetdocRejectsOtherCodes(self) -> None:
        with self.assertRaises(TypeError):
            getdoc(11127)


class TestParseError(TestCase):

    def testMessageAndOptions(self) -> None:
        fault = _fault()
        self.assertEqual(str(fault), "count: expected an integer value, but found 'abc' (invalid digit)")
        self.assertEqual(fault.options["value"], "abc")
        with self.assertRaises(TypeError):
            fault.options["value"] = "xyz"

    def testReplaceMergesOptions(self) -> None:
        fault = copy.replace(_fault(), fancy=True)
        self.assertIsInstance(fault, InvalidDigitError)
        self.assertTrue(fault.options["fancy"])
        self.assertEqual(fault.options["input"], "count")

    def testReplaceRejectsPositionals(self) -> None:
        with self.assertRaises(AssertionError):
            _fault().__replace__("positional")

    def testSchemaErrorIsNotAParseError(self) -> None:
        self.assertFalse(issubclass(SchemaError, ParseError))
        self.assertTrue(issubclass(SchemaError, TypeError))


class TestRendering(RecordingTestCase):

    def testPlainRendering(self) -> None:
        faults.console.print(copy.replace(_fault(), colorful=False))
        output = self.stream.getvalue()
        self.assertIn("[ tool — 11127 | Invalid Integer ]", output)
        self.assertIn("found 'abc' (invalid digit)", output)
        self.assertIn("→ use only decimal digits", output)

    def testFancyRendering(self) -> None:
        faults.console.print(copy.replace(_fault(), fancy=True, colorful=False))
        output = self.stream.getvalue()
        self.assertIn("Invalid Integer", output)
        self.assertIn("╭", output)

    def testStylesFromHost(self) -> None:
        styles = {"code": "bold red"}
        with mock.patch.object(sys.modules["__main__"], "__styles__", styles, create=True):
            faults.console.print(_fault())
        self.assertIn("11127", self.stream.getvalue())

    def testRenderingWithoutCodeOrTitle(self) -> None:
        faults.console.print(ParseError("boom", colorful=False))
        output = self.stream.getvalue()
        self.assertIn("[ tool | Parse Error ]", output)
        self.assertIn("boom", output)


class TestTrigger(RecordingTestCase):

    def testRaisesOutsideShell(self) -> None:
        with self.assertRaises(InvalidDigitError) as context:
            trigger(_fault(), colorful=False)
        self.assertFalse(context.exception.options["colorful"])

    def testPrintsAndExitsInShell(self) -> None:
        with self.assertRaises(SystemExit) as context:
            trigger(_fault(), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Invalid Integer", self.stream.getvalue())

    def testRejectsNonFaults(self) -> None:
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestFatal(RecordingTestCase):

    def testFatalExits(self) -> None:
        with self.assertRaises(SystemExit) as context:
            fatal(_fault(), colorful=False)
        self.assertEqual(context.exception.code, 1)

    def testGuardRoutesParseErrors(self) -> None:
        with self.assertRaises(SystemExit):
            with guard(colorful=False):
                parse_arg(u32, "-n=")
        output = self.stream.getvalue()
        self.assertIn("Missing Value", output)
        self.assertIn("did you forget the `=`?", output)

    def testGuardRoutesBareParseErrors(self) -> None:
        with self.assertRaises(SystemExit) as context:
            with guard(colorful=False):
                raise ParseError("boom")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("boom", self.stream.getvalue())

    def testGuardLetsSchemaErrorsThrough(self) -> None:
        with self.assertRaises(SchemaError):
            with guard():
                parse_arg(float, "--ratio=0.5")
        self.assertEqual(self.stream.getvalue(), "")

    def testGuardIsSilentWithoutFaults(self) -> None:
        with guard():
            result = parse_arg(u32, "-n=5")
        self.assertEqual(result, 5)
        self.assertEqual(self.stream.getvalue(), "")

    def testMissingValueCarriesToken(self) -> None:
        with self.assertRaises(MissingValueError) as context:
            parse_arg(u32, "--count")
        self.assertEqual(context.exception.options["token"], "--count")


if __name__ == "__main__":
    unittest.main()
