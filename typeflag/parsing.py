"""
Typeflag parsing: turn one raw argument token into a typed value.

Pipeline
- parse_arg(target, token)
  • name() + value() from typeflag.tokens, rejects a missing '=value', then
    hands over to parse_value().
- parse_value(target, name, value)
  • booleans are presence flags (always True); everything else is validated
    against the declarable targets and converted:
    text → verbatim, Integer → parse_int(), Choice → parse_enum().
- parse_int(target, name, value)
  • strict base-10, distinguishing overflow from invalid digits.
- parse_enum(target, name, value)
  • exact, case-sensitive match on member names.

Faults
- Every user error raises a ParseError subclass carrying a message, a title, a
  FaultCode, a hint, the option name (`input`) and the offending `value`.
  Nothing here prints or exits: wrap the caller in faults.guard() for that.
- Misdeclared targets raise SchemaError before any value is looked at.

Quick example:
    >>> parse_arg(text, "--path=data.yaml")
    'data.yaml'
    >>> parse_arg(u32, "-n=5")
    5
"""
from .faults import *
from .targets import *
from .tokens import name as _name, value as _value
from .utils import enumerate_names

_DIGITS = "0123456789"


def parse_arg(target, token, /):
    """
    Parse the value carried by a raw argument token.

    Parameters
    - target: a target descriptor or an annotation understood by targets.target().
    - token: the raw argument, e.g. '--path=data.yaml' or '-n=5'.

    Returns
    - the converted value (see parse_value()).

    Raises
    - MissingValueError when the token has no '=' or nothing after it.
    - SchemaError when `target` cannot be declared, whatever the token holds.
    - any fault raised by parse_value().
    """
    if not (target is bool or target == boolean):
        validate(target)

    name = _name(token)
    value = _value(token)
    if not value:
        raise MissingValueError(
            "could not parse argument `%s`: value length is 0. did you forget the `=`? (like: `-%s=`)" % (name, name),
            title="missing value",
            code=FaultCode.MISSING_INLINE_VALUE,
            hint="add a value after '=' (for example: -%s=<value>)" % name,
            input=name,
            token=token,
            docs=getdoc(FaultCode.MISSING_INLINE_VALUE),
        )
    return parse_value(target, name, value)


def parse_value(target, name, value, /):
    """
    Convert the raw value of option `name` into `target`.

    Behavior
    - boolean: returns True and ignores `value` (presence is the signal).
    - empty value: EmptyValueError.
    - Optional(payload): converted as the payload.
    - text: `value` itself; Integer: parse_int(); Choice: parse_enum().

    Raises
    - SchemaError when `target` cannot be declared (see targets.validate()).
    - ParseError subclasses for malformed values.
    """
    if target is bool or target == boolean:
        return True

    descriptor = validate(target)

    # parse_arg() already rejects empty values; direct callers still get a fault.
    if not value:
        raise EmptyValueError(
            "value for argument `%s` has zero length!" % name,
            title="empty value",
            code=FaultCode.EMPTY_VALUE,
            hint="pass a non-empty value to '%s'" % name,
            input=name,
            docs=getdoc(FaultCode.EMPTY_VALUE),
        )

    if isinstance(descriptor, Optional):
        descriptor = descriptor.payload

    match descriptor:
        case Text():
            return value
        case Integer():
            return parse_int(descriptor, name, value)
        case Choice():
            return parse_enum(descriptor, name, value)
    raise AssertionError("unreachable: %r passed validation" % (descriptor,))


def parse_int(target, name, value, /):
    """
    Parse a base-10 integer into the width and signedness of `target`.

    Grammar
    - an optional '+' or '-' followed by at least one ASCII digit; nothing else
      (no whitespace, underscores, or radix prefixes).

    Digits are accumulated left to right, so whichever comes first decides the
    fault: a digit pushing the value out of range (IntegerOverflowError) or a
    character that is not a digit (InvalidDigitError). A '-' on an unsigned
    target is only valid for zero.

    Examples
    - parse_int(u32, "n", "6")          -> 6
    - parse_int(u32, "n", "4294967296") -> IntegerOverflowError
    - parse_int(u32, "n", "abc")        -> InvalidDigitError
    """
    descriptor = validate(target)
    if not isinstance(descriptor, Integer):
        raise SchemaError("parse_int() target must be a sized integer, not %r" % (descriptor,))

    def invalid():
        return InvalidDigitError(
            "%s: expected an integer value, but found '%s' (invalid digit)" % (name, value),
            title="invalid integer",
            code=FaultCode.INVALID_DIGIT,
            hint="use only decimal digits with an optional leading sign (for example: -%s=42)" % name,
            input=name,
            value=value,
            docs=getdoc(FaultCode.INVALID_DIGIT),
        )

    sign = 1
    digits = value
    if digits[:1] in ("+", "-"):
        sign = -1 if digits[0] == "-" else 1
        digits = digits[1:]
    if not digits:
        raise invalid()

    result = 0
    for char in digits:
        if char not in _DIGITS:
            raise invalid()
        result = result * 10 + sign * _DIGITS.index(char)
        if not descriptor.minimum <= result <= descriptor.maximum:
            raise IntegerOverflowError(
                "%s: value exceeds %d-bit %s integer: '%s'" % (name, descriptor.bits, descriptor.signedness, value),
                title="integer overflow",
                code=FaultCode.INTEGER_OVERFLOW,
                hint="use a value between %d and %d" % (descriptor.minimum, descriptor.maximum),
                input=name,
                value=value,
                bits=descriptor.bits,
                signedness=descriptor.signedness,
                docs=getdoc(FaultCode.INTEGER_OVERFLOW),
            )
    return result


def parse_enum(target, name, value, /):
    """
    Select the member of an exhaustive enumeration named exactly `value`.

    Example
    - class E(Enum): ok = 1; not_ok = 2
      parse_enum(E, "e", "ok")    -> E.ok
      parse_enum(E, "e", "maybe") -> InvalidChoiceError ("expected one of ok, not_ok")
    """
    descriptor = validate(target)
    if not isinstance(descriptor, Choice):
        raise SchemaError("parse_enum() target must be an enumeration, not %r" % (descriptor,))

    enumeration = descriptor.enum
    try:
        return enumeration.__members__[value]
    except KeyError:
        raise InvalidChoiceError(
            "%s: expected one of %s, but found '%s'" % (name, enumerate_names(enumeration), value),
            title="invalid choice",
            code=FaultCode.INVALID_CHOICE,
            hint="use one of: %s" % enumerate_names(enumeration, " · "),
            input=name,
            value=value,
            choices=tuple(enumeration.__members__),
            docs=getdoc(FaultCode.INVALID_CHOICE),
        ) from None


__all__ = (
    "parse_arg",
    "parse_value",
    "parse_int",
    "parse_enum",
)
