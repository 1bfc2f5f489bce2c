# Message tokenizer.
#
# Splits a raw message into tokens and renders tokens back.  Two notations:
#
#   string   你好[CQ:at,qq=123]世界          (inline CQ codes in running text)
#   array    [{"type":"text","data":{...}},...]
#
# String notation is only scanned for segment boundaries; every segment is
# kept as a RawSegment and decoded on demand.  Array notation is decoded
# eagerly, one element at a time.  A segment that cannot be decoded (unknown
# tag, bad field, broken JSON) never stops tokenization: it is kept as a
# RawSegment and the error surfaces when that one token is resolved.

from __future__ import annotations

import json
from typing import Any, Iterator

import cqcode.codec as codec
import cqcode.logger as log
from cqcode.error import SegmentError
from cqcode.message import NOTATIONS, Message, RawSegment, append_token
from segments import registry
from segments.text import Text

l = log.get_logger()

_SEPARATORS = ", \t\r\n"


def is_json_notation(raw: str) -> bool:
    return raw.startswith("[{") and raw.endswith("}]")


def tokenize(raw: str) -> Message:
    """Tokenize *raw*, picking the notation from its shape."""
    if is_json_notation(raw):
        return tokenize_json(raw)
    return tokenize_inline(raw)


# ---------------------------------------------------------------------------
# String notation
# ---------------------------------------------------------------------------

def tokenize_inline(raw: str) -> Message:
    tokens: list[Any] = []
    pos = 0
    for match in codec.SEGMENT_RE.finditer(raw):
        if match.start() > pos:
            tokens.append(Text(raw[pos:match.start()]))
        tokens.append(RawSegment(match.group(0), match.group("tag").lower(), "string"))
        pos = match.end()

    # Trailing text, or the whole input when it holds no segment (even "")
    if pos < len(raw) or not tokens:
        tokens.append(Text(raw[pos:]))

    return Message(tokens, frozen=True)


# ---------------------------------------------------------------------------
# Array notation
# ---------------------------------------------------------------------------

def _split_objects(body: str) -> Iterator[str]:
    """Yield each top-level ``{...}`` of *body* (an array without its brackets).

    Brace counting skips over JSON string literals, so braces inside text or
    nested node payloads do not end an element early.  Anything between
    elements other than separators is yielded as a stray chunk, and an
    unterminated trailing element is yielded as-is.
    """
    depth = 0
    start = 0
    stray_start: int | None = None
    in_string = False
    escaped = False

    for i, ch in enumerate(body):
        if depth == 0:
            if ch == "{" or ch in _SEPARATORS:
                if stray_start is not None:
                    yield body[stray_start:i]
                    stray_start = None
                if ch == "{":
                    start = i
                    depth = 1
            elif stray_start is None:
                stray_start = i
            continue

        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                yield body[start:i + 1]

    if depth > 0:
        yield body[start:]
    elif stray_start is not None:
        yield body[stray_start:]


def _object_token(obj: Any, raw: str | None = None):
    """Decode one parsed array element, or keep it raw if that fails."""
    if raw is None:
        raw = codec.dumps(obj)

    tag = obj.get("type") if isinstance(obj, dict) else None
    if not isinstance(tag, str):
        l.debug(f"Array element without a type kept raw: {raw}")
        return RawSegment(raw, "", "array")

    shape = registry.lookup(tag)
    if shape is None:
        l.debug(f"Unknown segment shape {tag!r} kept raw")
        return RawSegment(raw, tag.lower(), "array")

    try:
        return codec.decode_json_obj(shape, obj, raw)
    except SegmentError as e:
        l.debug(f"Segment {tag!r} kept raw: {e}")
        return RawSegment(raw, tag.lower(), "array")


def tokenize_json(raw: str) -> Message:
    tokens: list[Any] = []
    for chunk in _split_objects(raw[1:-1]):
        try:
            obj = json.loads(chunk)
        except json.JSONDecodeError:
            l.debug(f"Unparseable array element kept raw: {chunk!r}")
            append_token(tokens, RawSegment(chunk, "", "array"))
            continue
        append_token(tokens, _object_token(obj, chunk))
    return Message(tokens, frozen=True)


def tokenize_json_array(items: list[Any]) -> Message:
    """Tokenize an already-parsed JSON array of segment objects."""
    tokens: list[Any] = []
    for obj in items:
        append_token(tokens, _object_token(obj))
    return Message(tokens, frozen=True)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _inline(token: Any) -> str:
    if isinstance(token, RawSegment):
        if token.notation == "string":
            return token.raw
        token = token.resolve()
    return codec.encode_inline(token)


def _json_text(token: Any) -> str:
    if isinstance(token, RawSegment):
        if token.notation == "array":
            return token.raw
        token = token.resolve()
    return codec.encode_json(token)


def _json_obj(token: Any) -> dict[str, Any]:
    if isinstance(token, RawSegment):
        if token.notation == "array" and token.tag:
            # Unknown or undecodable, but still a JSON object: pass it through
            return json.loads(token.raw)
        token = token.resolve()
    return codec.encode_json_obj(token)


def render_inline(message: Message) -> str:
    """Concatenate the inline form of every token.

    Text runs are copied verbatim; only segment field values are escaped.
    """
    return "".join(_inline(token) for token in message)


def render_json(message: Message) -> str:
    return "[" + ",".join(_json_text(token) for token in message) + "]"


def render_json_array(message: Message) -> list[dict[str, Any]]:
    return [_json_obj(token) for token in message]


def render(message: Message, notation: str = "string") -> str:
    if notation not in NOTATIONS:
        raise ValueError(f"notation must be one of {NOTATIONS}, not {notation!r}")
    if notation == "array":
        return render_json(message)
    return render_inline(message)
