from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict

import cqcode.codec as codec


class Segment(BaseModel):
    """Base class for all segment shapes.

    A shape declares its wire ``tag`` and a set of optional fields; the shared
    codec derives both wire notations from the field list.  Unknown keyword
    arguments are rejected, the same way a config block with an unknown key is.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    tag: ClassVar[str] = ""
    # Bare shapes have a single field and no bracket form (plain text)
    bare: ClassVar[bool] = False

    def to_string(self) -> str:
        """Inline notation, e.g. ``[CQ:face,id=123]``."""
        return codec.encode_inline(self)

    @classmethod
    def from_string(cls, raw: str) -> Self:
        return codec.decode_inline(cls, raw)

    def to_json(self) -> str:
        """JSON notation, e.g. ``{"type":"face","data":{"id":123}}``."""
        return codec.encode_json(self)

    @classmethod
    def from_json(cls, raw: str) -> Self:
        return codec.decode_json(cls, raw)

    def to_dict(self) -> dict[str, Any]:
        return codec.encode_json_obj(self)

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> Self:
        return codec.decode_json_obj(cls, obj)

    def __str__(self) -> str:
        return self.to_string()
