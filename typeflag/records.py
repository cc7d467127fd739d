"""
Typeflag records: derive uniform records from a schema record.

A schema record is a dataclass (or NamedTuple) whose fields name the options a
command understands. record() builds a parallel dataclass with the same field
names, in the same order, where every field has the same payload type and the
same default. This is how "was this option given?" or "raw text per option"
containers are made without writing one field per option:

    >>> @dataclass
    ... class Options:
    ...     path: str | None
    ...     count: u32
    ...     verbose: bool
    ...
    >>> Seen = record(Options, bool, False)
    >>> Seen()
    OptionsBool(path=False, count=False, verbose=False)

options() is the declaration-time pass over the same schema: it validates the
target of every field once, so that parsing never meets an undeclarable type.
"""
import copy
import dataclasses
import functools
import re
import typing
from types import MappingProxyType

from .faults import SchemaError
from .targets import boolean, layout, target, validate
from .utils import Unset, coalesce


def _annotations(schema):
    try:
        return typing.get_type_hints(schema)
    except (NameError, TypeError):
        # Unresolvable forward references stay as strings.
        return getattr(schema, "__annotations__", {})


def _schema_fields(schema):
    """
    Return (name, annotation) pairs of a record type, or raise SchemaError.
    """
    if isinstance(schema, type) and dataclasses.is_dataclass(schema):
        annotations = _annotations(schema)
        return [(field.name, annotations.get(field.name, field.type)) for field in dataclasses.fields(schema)]
    if isinstance(schema, type) and issubclass(schema, tuple) and hasattr(schema, "_fields"):
        annotations = _annotations(schema)
        return [(name, annotations.get(name, Unset)) for name in schema._fields]
    raise SchemaError("schema must be a dataclass or a NamedTuple type, not %r" % (schema,))


def _typename(payload):
    name = getattr(payload, "__name__", None) or repr(payload)
    return "".join(part[:1].upper() + part[1:] for part in re.findall(r"[^\W_]+", name))


def fields(record, /):
    """
    Return the field names of a record type (schema or generated), in order.
    """
    return tuple(name for name, _ in _schema_fields(record))


def default(record, field, /):
    """
    Return the default of one field of a record type, or Unset when it has none.

    Default factories are invoked, so the result is a fresh value.

    Raises
    - SchemaError when `record` is not a dataclass type.
    - KeyError when `field` is not a field of `record`.
    """
    if not (isinstance(record, type) and dataclasses.is_dataclass(record)):
        raise SchemaError("default() argument must be a dataclass type, not %r" % (record,))
    for candidate in dataclasses.fields(record):
        if candidate.name != field:
            continue
        if candidate.default is not dataclasses.MISSING:
            return candidate.default
        if candidate.default_factory is not dataclasses.MISSING:
            return candidate.default_factory()
        return Unset
    raise KeyError(field)


def record(schema, payload, default=Unset, /, *, name=Unset):
    """
    Build a dataclass with one `payload`-typed field per field of `schema`.

    Parameters
    - schema: dataclass or NamedTuple type; only its field names and their order matter.
    - payload: the annotation of every generated field (a type, a union, or a target).
    - default: value given to every field when omitted at construction. When Unset,
      fields have no default and must all be passed explicitly.
    - name: class name of the result; defaults to schema name + payload name.

    Returns
    - a new mutable dataclass type, defined in the schema's module. Each field
      carries metadata["alignment"]: the payload alignment, or 0 for zero-sized
      payloads, which need no storage.

    Raises
    - SchemaError when schema is not record-shaped, or default does not fit payload.
    """
    names = [field for field, _ in _schema_fields(schema)]

    if default is not Unset:
        try:
            descriptor = target(payload)
        except (SchemaError, TypeError):
            descriptor = None
        if descriptor is not None and not descriptor.accepts(default):
            raise SchemaError("default %r is not a valid %r value" % (default, descriptor))
        if descriptor is None and isinstance(payload, type) and not isinstance(default, payload):
            raise SchemaError("default %r is not a %r instance" % (default, payload.__qualname__))

    size, alignment = layout(payload)
    metadata = {"alignment": alignment if size > 0 else 0}

    if default is Unset:
        options = {}
    elif getattr(default, "__hash__", None) is None:
        # Unhashable defaults are mutable; every instance gets its own copy.
        options = {"default_factory": functools.partial(copy.deepcopy, default)}
    else:
        options = {"default": default}

    return dataclasses.make_dataclass(
        coalesce(name, schema.__name__ + _typename(payload)),
        [(field, payload, dataclasses.field(metadata=metadata, **options)) for field in names],
        module=schema.__module__,
    )


def options(schema, /):
    """
    Validate the target of every field of a schema record, once.

    Fields annotated `bool` are presence-only flags and map to `boolean`; every
    other annotation must pass targets.validate().

    Returns
    - a read-only mapping of field name to target descriptor, in field order.

    Raises
    - SchemaError on the first field whose target cannot be declared.
    """
    result = {}
    for field, annotation in _schema_fields(schema):
        if annotation is Unset:
            raise SchemaError("field %r of %r has no annotation" % (field, schema.__qualname__))
        if isinstance(annotation, str):
            raise SchemaError("field %r of %r has a string annotation; use real types" % (field, schema.__qualname__))
        try:
            result[field] = boolean if target(annotation) == boolean else validate(annotation)
        except SchemaError as exception:
            raise SchemaError("field %r of %r: %s" % (field, schema.__qualname__, exception)) from None
    return MappingProxyType(result)


__all__ = (
    "record",
    "fields",
    "default",
    "options",
)
