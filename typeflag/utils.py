"""
Typeflag utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the targets, parsing and records layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- enumerate_names(enum, separator=", ")
  • Join the declared member names of an enumeration, in declaration order.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import functools
from enum import EnumType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. The generated record
    defaults are the typical case: `record(Schema, int | None, None)` means
    "default to None", while omitting the default means "no default at all".

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and singleton per process.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Returns `object` unless it is Unset, in which case `default` is returned.
    Falsey values like None, 0, "" or [] are preserved as-is.
    """
    return object if object is not Unset else default


@functools.cache
def enumerate_names(enum, separator=", ", /):
    """
    Join the member names of an enumeration in declaration order.

    Aliases are declared names too, so they are listed where they appear.

    Examples
    - enumerate_names(Color)         -> "red, green, blue"
    - enumerate_names(Color, " · ")  -> "red · green · blue"
    """
    if not isinstance(enum, EnumType):
        raise TypeError("enumerate_names() argument must be an enumeration")
    return separator.join(enum.__members__)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "enumerate_names",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
