# Interaction segments: faces, mentions, replies, pokes, gifts and the small
# "magic" segments (rock-paper-scissors, dice, window shake).
#
# Boolean fields travel as 0/1 in the inline notation and as true/false in
# the JSON notation.

from typing import ClassVar

from pydantic import Field

from segments import Segment
from segments.registry import register


class Face(Segment):
    """QQ built-in face (emoji)."""
    tag: ClassVar[str] = "face"

    id: int | None = None


class At(Segment):
    """Mention.  ``qq`` is a user id or the literal ``all``."""
    tag: ClassVar[str] = "at"

    qq: str | None = None
    name: str | None = None     # shown when the id is not in the group


class Rps(Segment):
    tag: ClassVar[str] = "rps"


class Dice(Segment):
    tag: ClassVar[str] = "dice"


class Shake(Segment):
    tag: ClassVar[str] = "shake"


class Anonymous(Segment):
    """Send anonymously (group messages only)."""
    tag: ClassVar[str] = "anonymous"

    ignore: bool | None = None  # send normally if anonymity is unavailable


class Reply(Segment):
    """Quote another message, by ``id`` or by a custom ``text``/``qq``/``time``/``seq``."""
    tag: ClassVar[str] = "reply"

    id: int | None = None
    text: str | None = None
    qq: int | None = None
    time: int | None = None
    seq: int | None = None


class RedBag(Segment):
    tag: ClassVar[str] = "redbag"

    title: str | None = None


class Poke(Segment):
    tag: ClassVar[str] = "poke"

    qq: int | None = None


class Gift(Segment):
    tag: ClassVar[str] = "gift"

    qq: int | None = None
    id: int | None = None       # gift type, 0-13


class Contact(Segment):
    """Recommend a friend (``type=qq``) or a group (``type=group``)."""
    tag: ClassVar[str] = "contact"

    type_: str | None = Field(default=None, alias="type")
    id: str | None = None


for _shape in (Face, At, Rps, Dice, Shake, Anonymous, Reply, RedBag, Poke, Gift, Contact):
    register(_shape)
