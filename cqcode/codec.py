# Generic segment codec.
#
# Every segment shape is a pydantic model whose fields are all optional.  The
# codec reads the field list off the model class at runtime and uses it to
# encode/decode both wire notations:
#
#   inline   [CQ:face,id=123]
#   JSON     {"type":"face","data":{"id":123}}
#
# ``None`` means "absent": absent fields are never emitted, and a field that is
# missing on the wire decodes to ``None``.  Zero, False and "" are present.

from __future__ import annotations

import json
import math
import re
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any

import cqcode.logger as log
from cqcode.error import (
    FieldTypeError,
    MalformedSegment,
    TagMismatch,
    UnknownField,
    raise_and_log,
)
from cqcode.escape import escape, unescape
from cqcode.message import Message

l = log.get_logger()

# One inline segment.  Values never contain "," "[" or "]" once escaped.
SEGMENT_PATTERN = r"\[CQ:(?P<tag>\w+)(?P<fields>(?:,\w+=[^,\[\]]*)*)\]"
SEGMENT_RE = re.compile(SEGMENT_PATTERN, re.ASCII)

_INT_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)
# Plain decimal with optional exponent: no "_", spaces, inf or nan
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


class FieldKind(Enum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STR = "str"
    MESSAGE = "message"


@dataclass(frozen=True)
class FieldSpec:
    """One declared field: Python attribute, wire name and value kind."""
    attr: str
    wire: str
    kind: FieldKind


# ---------------------------------------------------------------------------
# Schema reflection
# ---------------------------------------------------------------------------

_SCHEMAS: dict[type, tuple[FieldSpec, ...]] = {}


def _kind_of(annotation: Any) -> FieldKind:
    args = [a for a in typing.get_args(annotation) if a is not type(None)]
    target = args[0] if len(args) == 1 else annotation

    # bool before int: bool is a subclass of int
    if target is bool:
        return FieldKind.BOOL
    if target is int:
        return FieldKind.INT
    if target is float:
        return FieldKind.FLOAT
    if target is str:
        return FieldKind.STR
    if isinstance(target, type) and issubclass(target, Message):
        return FieldKind.MESSAGE
    raise TypeError(f"Unsupported segment field type: {annotation!r}")


def schema(shape: type) -> tuple[FieldSpec, ...]:
    """Return the ordered field specs of *shape*, cached per class."""
    specs = _SCHEMAS.get(shape)
    if specs is None:
        specs = tuple(
            FieldSpec(name, info.alias or name, _kind_of(info.annotation))
            for name, info in shape.model_fields.items()
        )
        _SCHEMAS[shape] = specs
    return specs


def _by_wire(shape: type) -> dict[str, FieldSpec]:
    return {spec.wire: spec for spec in schema(shape)}


def _check_tag(shape: type, tag: str, raw: str) -> None:
    if tag.lower() != shape.tag:
        raise_and_log(
            f"Segment tag {tag!r} does not match shape {shape.tag!r}",
            TagMismatch,
            raw=raw,
        )


# ---------------------------------------------------------------------------
# Inline notation
# ---------------------------------------------------------------------------

def _format_float(value: float) -> str:
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def _format_value(kind: FieldKind, value: Any) -> str:
    if kind is FieldKind.BOOL:
        return "1" if value else "0"
    if kind is FieldKind.FLOAT:
        return _format_float(value)
    if kind is FieldKind.MESSAGE:
        return value.to_string()
    return str(value)


def _parse_value(spec: FieldSpec, text: str, raw: str) -> Any:
    kind = spec.kind
    if kind is FieldKind.STR:
        return text
    if kind is FieldKind.MESSAGE:
        # Nested messages are decoded along with the segment that owns them
        return Message.from_string(text).resolve(errors="raw")
    if kind is FieldKind.INT and _INT_RE.fullmatch(text):
        return int(text)
    if kind is FieldKind.BOOL and text in ("0", "1"):
        return text == "1"
    if kind is FieldKind.FLOAT and _FLOAT_RE.fullmatch(text):
        return float(text)
    raise_and_log(
        f"Field {spec.wire!r} expects {kind.value}, got {text!r}",
        FieldTypeError,
        raw=raw,
        field=spec.wire,
    )


def encode_inline(segment) -> str:
    """Render *segment* in the inline notation."""
    shape = type(segment)
    specs = schema(shape)

    if shape.bare:
        value = getattr(segment, specs[0].attr)
        return "" if value is None else str(value)

    parts = [f"[CQ:{shape.tag}"]
    for spec in specs:
        value = getattr(segment, spec.attr)
        if value is None:
            continue
        parts.append(f",{spec.wire}={escape(_format_value(spec.kind, value))}")
    parts.append("]")
    return "".join(parts)


def decode_inline(shape: type, raw: str):
    """Decode one inline segment into an instance of *shape*."""
    specs = schema(shape)

    if shape.bare:
        return shape(**{specs[0].attr: raw})

    match = SEGMENT_RE.fullmatch(raw)
    if match is None:
        raise_and_log(f"Malformed segment {raw!r}", MalformedSegment, raw=raw)
    _check_tag(shape, match.group("tag"), raw)

    by_wire = _by_wire(shape)
    values: dict[str, Any] = {}
    fields = match.group("fields")
    for pair in fields[1:].split(",") if fields else []:
        name, _, text = pair.partition("=")
        spec = by_wire.get(name)
        if spec is None:
            raise_and_log(
                f"Unknown field {name!r} for shape {shape.tag!r}",
                UnknownField,
                raw=raw,
                field=name,
            )
        if spec.attr in values:
            raise_and_log(
                f"Field {name!r} repeated in {raw!r}",
                MalformedSegment,
                raw=raw,
                field=name,
            )
        values[spec.attr] = _parse_value(spec, unescape(text), raw)

    return shape(**values)


# ---------------------------------------------------------------------------
# JSON notation
# ---------------------------------------------------------------------------

def dumps(obj: Any) -> str:
    """Compact JSON with non-ASCII text kept as-is."""
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def _coerce_json(spec: FieldSpec, value: Any, raw: str) -> Any:
    kind = spec.kind
    if kind is FieldKind.BOOL and isinstance(value, bool):
        return value
    if not isinstance(value, bool):
        if kind is FieldKind.INT and isinstance(value, int):
            return value
        if kind is FieldKind.FLOAT and isinstance(value, (int, float)):
            return float(value)
    if kind is FieldKind.STR and isinstance(value, str):
        return value
    if kind is FieldKind.MESSAGE and isinstance(value, list):
        return Message.from_json_array(value)
    raise_and_log(
        f"Field {spec.wire!r} expects {kind.value}, got {type(value).__name__}",
        FieldTypeError,
        raw=raw,
        field=spec.wire,
    )


def encode_json_obj(segment) -> dict[str, Any]:
    """Return the ``{"type": ..., "data": {...}}`` object for *segment*."""
    shape = type(segment)
    data: dict[str, Any] = {}
    for spec in schema(shape):
        value = getattr(segment, spec.attr)
        if value is None:
            continue
        if spec.kind is FieldKind.MESSAGE:
            value = value.to_json_array()
        data[spec.wire] = value
    return {"type": shape.tag, "data": data}


def encode_json(segment) -> str:
    return dumps(encode_json_obj(segment))


def decode_json_obj(shape: type, obj: Any, raw: str | None = None):
    """Decode an already-parsed JSON object into an instance of *shape*.

    *raw* is only used for error context; it is derived from *obj* when
    omitted.
    """
    if raw is None:
        raw = dumps(obj)

    if not isinstance(obj, dict):
        raise_and_log(f"Segment is not a JSON object: {raw}", MalformedSegment, raw=raw)

    tag = obj.get("type")
    if not isinstance(tag, str):
        raise_and_log(f"Segment has no 'type': {raw}", MalformedSegment, raw=raw)
    _check_tag(shape, tag, raw)

    data = obj.get("data")
    if not isinstance(data, dict):
        raise_and_log(f"Segment has no 'data' object: {raw}", MalformedSegment, raw=raw)

    by_wire = _by_wire(shape)
    values: dict[str, Any] = {}
    for name, value in data.items():
        spec = by_wire.get(name)
        if spec is None:
            raise_and_log(
                f"Unknown field {name!r} for shape {shape.tag!r}",
                UnknownField,
                raw=raw,
                field=name,
            )
        if value is None:
            continue
        values[spec.attr] = _coerce_json(spec, value, raw)

    return shape(**values)


def decode_json(shape: type, raw: str):
    """Decode one JSON segment object (as text) into an instance of *shape*."""
    try:
        obj = json.loads(raw)
    except json.JSONDecodeError as e:
        raise_and_log(f"Invalid segment JSON {raw!r}: {e}", MalformedSegment, raw=raw)
    return decode_json_obj(shape, obj, raw)


def decode(shape: type, raw: str, notation: str = "string"):
    """Decode *raw* with the decoder for *notation* (``string`` or ``array``)."""
    if notation == "array":
        return decode_json(shape, raw)
    return decode_inline(shape, raw)
