"""
Typeflag faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing parse faults.
- ParseError: base type that carries message + options and knows how to render
  itself in a friendly, lowercased, and actionable way.
- SchemaError: programming error for target types or records that cannot be used.
  It is a TypeError and is never rendered as a user fault.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- fatal(): surface a fault in shell mode, which prints it and exits the process.
- guard(): context manager routing every ParseError raised in its body to fatal().
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parsing functions never print or exit; they raise a ParseError subclass.
- The program entry point wraps its token loop in `with guard():` so the first
  fault is printed on stderr and terminates the process with status 1.
"""
import copy
import os.path
import sys
from collections import defaultdict
from contextlib import contextmanager
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - switches (options/flags) (1111x/1112x)
      • MISSING_INLINE_VALUE, EMPTY_VALUE, INVALID_CHOICE,
        INTEGER_OVERFLOW, INVALID_DIGIT

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    MISSING_INLINE_VALUE        = 11114
    EMPTY_VALUE                 = 11123
    INVALID_CHOICE              = 11124
    INTEGER_OVERFLOW            = 11126
    INVALID_DIGIT               = 11127

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class SchemaError(TypeError):
    """
    A target type or schema record that the parser cannot work with.

    Raised while declaring options (or on the first use of an undeclared
    target), never while parsing user input.
    """


def _prog():
    main = __import__("__main__")
    return getattr(main, "__prog__", os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "typeflag")


class ParseError(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options.get("code")
        title = self.options.get("title", "parse error")

        header = ["[ ", text(_prog(), styler("prog-name"))]
        if code is not None:
            header += [" — ", text(code.normalize() if isinstance(code, FaultCode) else code, styler("code"))]
        header += [" | ", text(title.title(), styler("error-title")), " ]"]
        header = Text.assemble(*header)
        message = text(self.message, styler("error-message"))
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left", width=console.width - 4)

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingValueError(ParseError): ...
class EmptyValueError(ParseError): ...
class IntegerOverflowError(ParseError): ...
class InvalidDigitError(ParseError): ...
class InvalidChoiceError(ParseError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console and the process exits;
      otherwise the (merged) fault is raised.

    typical options
    - shell, fancy, colorful, and any other context the reporter may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def fatal(fault, /, **options):
    """
    print a fault on stderr and terminate the process with status 1.

    this is the one place where a parse fault becomes a process exit.
    """
    trigger(fault, **options | {"shell": True})


@contextmanager
def guard(**options):
    """
    route every ParseError raised in the body to fatal().

    usage
        with guard(fancy=True):
            for token in sys.argv[1:]:
                ...
    """
    try:
        yield
    except ParseError as fault:
        fatal(fault, **options)


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "SchemaError",
    "ParseError",
    "MissingValueError",
    "EmptyValueError",
    "IntegerOverflowError",
    "InvalidDigitError",
    "InvalidChoiceError",
    "trigger",
    "fatal",
    "guard",
    "getdoc",
)
