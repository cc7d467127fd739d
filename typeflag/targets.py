"""
Typeflag target types: what a raw option value must become.

Overview
- Descriptors (frozen, hashable, usable as cache keys)
  • Text: the value verbatim (module singleton `text`).
  • Integer(bits, signed): a fixed-width integer; `u8`..`u128`, `i8`..`i128`,
    `usize` and `isize` are predefined.
  • Choice(enum): one member of an exhaustive enumeration, matched by name.
  • Optional(payload): a value of the payload, or None when the option is absent.
  • Boolean: presence-only flags (module singleton `boolean`).

- target(annotation)
  • Coerce a plain Python annotation into a descriptor:
    str → text, bool → boolean, Enum subclass → Choice, X | None → Optional(X).

- validate(annotation)
  • The declaration-time check: only text, sized integers, exhaustive enums with
    at least two members, and one level of optional around those are accepted.
    Anything else is a SchemaError (a programming error, never a user error).

- layout(payload)
  • (size, alignment) a native record would use to store the payload.

Quick example:
    >>> validate(u32)
    u32
    >>> validate(str | None)
    Optional(text)
    >>> validate(float)
    Traceback (most recent call last):
    ...
    typeflag.faults.SchemaError: unsupported target type 'float'
"""
import ctypes
import enum
import functools
import sys
import types
import typing
from dataclasses import dataclass

from .faults import SchemaError

# Width of a machine pointer in bytes (8 on 64-bit interpreters).
_POINTER = (sys.maxsize.bit_length() + 1) // 8


def _round_up(size, alignment):
    return -(-size // alignment) * alignment


class Target:
    """
    Base of all target descriptors.

    Subclasses expose `size` and `alignment` (storage layout) and `pytype`
    (the Python type of parsed values), and implement `accepts(value)`.
    """
    __slots__ = ()

    def accepts(self, value, /):
        return isinstance(value, self.pytype)


@dataclass(frozen=True, slots=True, repr=False)
class Text(Target):
    def __repr__(self):
        return "text"

    @property
    def pytype(self):
        return str

    @property
    def size(self):
        return 2 * _POINTER

    @property
    def alignment(self):
        return _POINTER


@dataclass(frozen=True, slots=True, repr=False)
class Boolean(Target):
    def __repr__(self):
        return "boolean"

    @property
    def pytype(self):
        return bool

    @property
    def size(self):
        return 1

    @property
    def alignment(self):
        return 1


@dataclass(frozen=True, slots=True, repr=False)
class Integer(Target):
    """
    A fixed-width integer target.

    Holds `bits` (0 to 65535) and the `signed` flag; `minimum`/`maximum` give
    the representable range. A zero-width integer only holds 0 and is zero-sized.
    """
    bits: int
    signed: bool = False

    def __post_init__(self):
        if not isinstance(self.bits, int) or isinstance(self.bits, bool):
            raise SchemaError("integer width must be an int")
        if not 0 <= self.bits <= 65535:
            raise SchemaError("integer width must be between 0 and 65535 bits, not %d" % self.bits)

    def __repr__(self):
        return "%s%d" % ("i" if self.signed else "u", self.bits)

    @property
    def signedness(self):
        return "signed" if self.signed else "unsigned"

    @property
    def minimum(self):
        if not self.signed or not self.bits:
            return 0
        return -(1 << (self.bits - 1))

    @property
    def maximum(self):
        if not self.bits:
            return 0
        return (1 << (self.bits - self.signed)) - 1

    @property
    def pytype(self):
        return int

    def accepts(self, value, /):
        return isinstance(value, int) and not isinstance(value, bool) and self.minimum <= value <= self.maximum

    @property
    def alignment(self):
        count = (self.bits + 7) // 8
        if not count:
            return 1
        return min(1 << (count - 1).bit_length(), 16)

    @property
    def size(self):
        return _round_up((self.bits + 7) // 8, self.alignment)


@dataclass(frozen=True, slots=True, repr=False)
class Choice(Target):
    """
    One member of an enumeration, selected by its exact (case-sensitive) name.
    """
    enum: type

    def __post_init__(self):
        if not isinstance(self.enum, enum.EnumType):
            raise SchemaError("choice target must wrap an enumeration, not %r" % (self.enum,))

    def __repr__(self):
        return "Choice(%s)" % self.enum.__qualname__

    @property
    def pytype(self):
        return self.enum

    @property
    def tag(self):
        """The smallest unsigned integer able to number every member."""
        return Integer(max(len(self.enum.__members__) - 1, 0).bit_length())

    @property
    def size(self):
        return self.tag.size

    @property
    def alignment(self):
        return self.tag.alignment


@dataclass(frozen=True, slots=True, repr=False)
class Optional(Target):
    """
    The payload target, or None when the option was not given.
    """
    payload: Target

    def __post_init__(self):
        if not isinstance(self.payload, Target):
            raise SchemaError("optional target must wrap a target, not %r" % (self.payload,))

    def __repr__(self):
        return "Optional(%r)" % (self.payload,)

    @property
    def pytype(self):
        return self.payload.pytype | None

    def accepts(self, value, /):
        return value is None or self.payload.accepts(value)

    @property
    def alignment(self):
        return max(self.payload.alignment, 1)

    @property
    def size(self):
        # Slices use the null pointer as their "absent" state.
        if isinstance(self.payload, Text):
            return self.payload.size
        return _round_up(self.payload.size + 1, self.alignment)


text = Text()
boolean = Boolean()

u8, u16, u32, u64, u128 = (Integer(bits) for bits in (8, 16, 32, 64, 128))
i8, i16, i32, i64, i128 = (Integer(bits, True) for bits in (8, 16, 32, 64, 128))
usize = Integer(8 * _POINTER)
isize = Integer(8 * _POINTER, True)


@functools.cache
def target(annotation, /):
    """
    Coerce a Python annotation (or a descriptor) into a target descriptor.

    Mapping
    - Target instances are returned unchanged.
    - str → text, bool → boolean.
    - Enum subclasses → Choice(enum).
    - `X | None` and `typing.Optional[X]` → Optional(target(X)).

    Raises
    - SchemaError for anything else, including plain `int`, which has no width.
    """
    if isinstance(annotation, Target):
        return annotation
    if annotation is str:
        return text
    if annotation is bool:
        return boolean
    if annotation is int:
        raise SchemaError("plain 'int' has no width; use a sized integer such as u32 or i64")
    if isinstance(annotation, enum.EnumType):
        return Choice(annotation)
    if isinstance(annotation, types.UnionType) or typing.get_origin(annotation) is typing.Union:
        arguments = typing.get_args(annotation)
        payloads = [argument for argument in arguments if argument is not types.NoneType]
        if len(payloads) == 1 and len(arguments) == 2:
            return Optional(target(payloads[0]))
        raise SchemaError("unions other than 'X | None' are not supported: %r" % (annotation,))
    raise SchemaError("unsupported target type %r" % getattr(annotation, "__qualname__", annotation))


def exhaustive(enumeration, /):
    """
    Tell whether every possible value of an enumeration is a named member.

    Flag enumerations (whose combinations are unnamed) and enumerations that
    override `_missing_` (and thus accept unnamed values) are not exhaustive.
    """
    if not isinstance(enumeration, enum.EnumType):
        raise TypeError("exhaustive() argument must be an enumeration")
    if issubclass(enumeration, enum.Flag):
        return False
    return enumeration._missing_.__func__ is enum.Enum._missing_.__func__


@functools.cache
def validate(annotation, /):
    """
    Check that an option can be declared with this target and return its descriptor.

    Accepted
    - text
    - Integer(bits, signed)
    - Choice(enum) where enum is exhaustive and has at least two members
    - Optional(payload) where payload is one of the above

    Raises
    - SchemaError for every other target (bare booleans included: they mark
      presence-only flags, which carry no value to convert).
    """
    match descriptor := target(annotation):
        case Text() | Integer():
            return descriptor
        case Choice(enum=enumeration):
            if not exhaustive(enumeration):
                raise SchemaError("enumeration %r is not exhaustive" % enumeration.__qualname__)
            if len(enumeration.__members__) < 2:
                raise SchemaError("enumeration %r must declare at least two members" % enumeration.__qualname__)
            return descriptor
        case Optional(payload=Optional() | Boolean() as payload):
            raise SchemaError("optional target cannot wrap %r" % (payload,))
        case Optional(payload=payload):
            validate(payload)
            return descriptor
        case Boolean():
            raise SchemaError("boolean targets mark presence-only flags and carry no value")
    raise SchemaError("unsupported target type %r" % (descriptor,))


def layout(payload, /):
    """
    Return the (size, alignment) pair used to store a payload in a record.

    Descriptors and the annotations target() understands report their native
    layout; NoneType is zero-sized; ctypes types report their own layout; any
    other Python type is stored as a reference (one pointer).
    """
    if payload is None or payload is types.NoneType:
        return 0, 1
    if isinstance(payload, type):
        try:
            return ctypes.sizeof(payload), ctypes.alignment(payload)
        except TypeError:
            pass
    try:
        descriptor = target(payload)
    except (SchemaError, TypeError):
        return _POINTER, _POINTER
    return descriptor.size, descriptor.alignment


__all__ = (
    # Descriptors
    "Target",
    "Text",
    "Boolean",
    "Integer",
    "Choice",
    "Optional",

    # Predefined targets
    "text",
    "boolean",
    "u8", "u16", "u32", "u64", "u128", "usize",
    "i8", "i16", "i32", "i64", "i128", "isize",

    # Functions
    "target",
    "exhaustive",
    "validate",
    "layout",
)
