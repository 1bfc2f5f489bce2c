# Message container.
#
# A Message is an ordered list of tokens.  A token is one of:
#   - a Text segment            (a run of plain text)
#   - a decoded segment         (any other shape from the catalog)
#   - a RawSegment              (located by the tokenizer, not decoded yet)
#
# The codec and tokenizer both import this module, so everything they provide
# is imported lazily inside the methods that need it.

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Literal

import cqcode.logger as log
from cqcode.error import MalformedSegment, SegmentError, UnknownShape, raise_and_log

if TYPE_CHECKING:
    from segments import Segment

l = log.get_logger()

Notation = Literal["string", "array"]
NOTATIONS: tuple[str, ...] = ("string", "array")

_ERROR_MODES = ("strict", "skip", "keep", "raw")


@dataclass(frozen=True)
class RawSegment:
    """A segment the tokenizer located but did not decode.

    ``raw`` is the exact wire substring, ``tag`` the lower-cased shape tag
    (empty when the segment was too broken to read one) and ``notation`` the
    notation it was found in.
    """
    raw: str
    tag: str
    notation: Notation = "string"

    def resolve(self, shape: type | None = None) -> Segment:
        """Decode into a typed segment.

        Without *shape* the registered shape for ``tag`` is used.
        """
        from cqcode import codec
        from segments import registry

        if shape is None:
            if not self.tag:
                raise_and_log(f"Malformed segment {self.raw!r}", MalformedSegment, raw=self.raw)
            shape = registry.lookup(self.tag)
            if shape is None:
                raise_and_log(f"Unknown segment shape {self.tag!r}", UnknownShape, raw=self.raw)
        return codec.decode(shape, self.raw, self.notation)

    def __str__(self) -> str:
        return self.raw


def _text_cls():
    from segments.text import Text
    return Text


def _is_segment(obj: Any) -> bool:
    from segments import Segment
    return isinstance(obj, Segment)


def _coerce_token(token: Any):
    if isinstance(token, str):
        return _text_cls()(token)
    if isinstance(token, RawSegment) or _is_segment(token):
        return token
    raise TypeError(f"Cannot add {type(token).__name__} to a Message")


def append_token(tokens: list[Any], token: Any) -> None:
    """Append *token*, merging it into a preceding text run."""
    Text = _text_cls()
    if isinstance(token, Text) and tokens and isinstance(tokens[-1], Text):
        tokens[-1] = Text((tokens[-1].text or "") + (token.text or ""))
    else:
        tokens.append(token)


class Message:
    """Ordered sequence of message tokens."""

    __slots__ = ("_tokens", "_frozen")

    def __init__(self, tokens: Iterable[Any] | str | None = None, *, frozen: bool = False):
        # A lone segment is iterable (pydantic models are), so wrap it first
        if isinstance(tokens, (str, RawSegment)) or _is_segment(tokens):
            tokens = [tokens]
        self._tokens: list[Any] = [_coerce_token(t) for t in tokens or ()]
        self._frozen = frozen

    @classmethod
    def of(cls, *tokens: Any) -> Message:
        """Build a message from segments / strings given as arguments."""
        return cls(tokens)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, raw: str) -> Message:
        """Tokenize *raw*, detecting its notation."""
        from cqcode import tokenizer
        return tokenizer.tokenize(raw)

    @classmethod
    def from_string(cls, raw: str) -> Message:
        from cqcode import tokenizer
        return tokenizer.tokenize_inline(raw)

    @classmethod
    def from_json(cls, raw: str) -> Message:
        from cqcode import tokenizer
        return tokenizer.tokenize_json(raw)

    @classmethod
    def from_json_array(cls, items: list[Any]) -> Message:
        from cqcode import tokenizer
        return tokenizer.tokenize_json_array(items)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_string(self) -> str:
        from cqcode import tokenizer
        return tokenizer.render_inline(self)

    def to_json(self) -> str:
        from cqcode import tokenizer
        return tokenizer.render_json(self)

    def to_json_array(self) -> list[dict[str, Any]]:
        from cqcode import tokenizer
        return tokenizer.render_json_array(self)

    def render(self, notation: Notation = "string") -> str:
        from cqcode import tokenizer
        return tokenizer.render(self, notation)

    def __str__(self) -> str:
        return self.to_string()

    # ------------------------------------------------------------------
    # Mutation (builders only)
    # ------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> Message:
        self._frozen = True
        return self

    def copy(self) -> Message:
        """Mutable shallow copy."""
        return Message(self._tokens)

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError("Message is frozen; use copy() to get a mutable one")

    def append(self, token: Any) -> Message:
        self._check_mutable()
        self._tokens.append(_coerce_token(token))
        return self

    def extend(self, tokens: Iterable[Any]) -> Message:
        self._check_mutable()
        self._tokens.extend(_coerce_token(t) for t in tokens)
        return self

    def insert(self, index: int, token: Any) -> Message:
        self._check_mutable()
        self._tokens.insert(index, _coerce_token(token))
        return self

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def is_plain_text(self) -> bool:
        Text = _text_cls()
        return all(isinstance(t, Text) for t in self._tokens)

    def extract_plain_text(self) -> str:
        Text = _text_cls()
        return "".join(t.text or "" for t in self._tokens if isinstance(t, Text))

    def segments(self, shape: type | None = None) -> Iterator[Segment]:
        """Yield the non-text segments, decoding raw tokens on the way.

        With *shape*, only instances of that shape are yielded and raw tokens
        with another tag are skipped without being decoded.
        """
        Text = _text_cls()
        for token in self._tokens:
            if isinstance(token, RawSegment):
                if shape is not None and token.tag != shape.tag:
                    continue
                token = token.resolve(shape)
            if isinstance(token, Text):
                continue
            if shape is None or isinstance(token, shape):
                yield token

    def resolve(self, errors: str = "strict") -> Message:
        """Return a message with every raw token decoded.

        *errors* decides what happens to a token that fails to decode:
        ``strict`` raises, ``skip`` drops it, ``keep`` passes its wire text
        through as plain text and ``raw`` leaves it as an undecoded token.
        Text runs left next to each other are merged.
        """
        if errors not in _ERROR_MODES:
            raise ValueError(f"errors must be one of {_ERROR_MODES}, not {errors!r}")

        Text = _text_cls()
        resolved: list[Any] = []
        for token in self._tokens:
            if not isinstance(token, RawSegment):
                append_token(resolved, token)
                continue
            try:
                append_token(resolved, token.resolve())
            except SegmentError as e:
                if errors == "strict":
                    raise
                if errors == "raw":
                    l.debug(f"Segment left undecoded {token.raw!r}: {e}")
                    resolved.append(token)
                elif errors == "skip":
                    l.warning(f"Dropped invalid segment {token.raw!r}: {e}")
                else:
                    l.warning(f"Passing invalid segment through as text {token.raw!r}: {e}")
                    append_token(resolved, Text(token.raw))
        return Message(resolved, frozen=self._frozen)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._tokens)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Message(self._tokens[index])
        return self._tokens[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Message):
            return self._tokens == other._tokens
        if isinstance(other, list):
            return self._tokens == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: Any) -> Message:
        result = self.copy()
        if isinstance(other, Message):
            result.extend(other)
        else:
            result.append(other)
        return result

    def __repr__(self) -> str:
        return f"Message({self._tokens!r})"
