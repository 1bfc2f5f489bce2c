from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


# ---------------------------------------------------------------------------
# Reusable bool coercion: "true" / "1" / "yes" → True
# ---------------------------------------------------------------------------

def _coerce_bool(v: object) -> object:
    if isinstance(v, str):
        return v.lower() in ("true", "1", "yes")
    return v


CoercedBool = Annotated[bool, BeforeValidator(_coerce_bool)]


# ---------------------------------------------------------------------------
# go-cqhttp ``message`` block; its other keys (force-fragment, fix-url, ...)
# concern the backend and are ignored
# ---------------------------------------------------------------------------

class MessageConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # Notation used when rendering: inline CQ codes or a JSON segment array
    post_format:           Literal["string", "array"] = Field("string", alias="post-format")
    # Drop segments that fail to decode instead of sending them as raw text
    ignore_invalid_cqcode: CoercedBool                = Field(False, alias="ignore-invalid-cqcode")


# ---------------------------------------------------------------------------
# Top-level application config
# ---------------------------------------------------------------------------

class AppConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: MessageConfig = Field(default_factory=MessageConfig)
