# Rich content: link shares, locations, music cards, raw XML/JSON cards and
# text-to-speech.

from typing import ClassVar

from pydantic import Field

from segments import Segment
from segments.registry import register


class Share(Segment):
    """Link share card."""
    tag: ClassVar[str] = "share"

    url: str | None = None
    title: str | None = None
    content: str | None = None
    image: str | None = None


class Location(Segment):
    tag: ClassVar[str] = "location"

    lon: float | None = None
    lat: float | None = None
    title: str | None = None
    content: str | None = None


class Music(Segment):
    """Music share.  ``type`` is qq / 163 / xm, or ``custom`` with url/audio/title."""
    tag: ClassVar[str] = "music"

    type_: str | None = Field(default=None, alias="type")
    id: str | None = None
    url: str | None = None
    audio: str | None = None
    title: str | None = None
    content: str | None = None
    image: str | None = None


class Xml(Segment):
    tag: ClassVar[str] = "xml"

    data: str | None = None
    resid: int | None = None


class Json(Segment):
    tag: ClassVar[str] = "json"

    data: str | None = None
    resid: int | None = None


class Tts(Segment):
    tag: ClassVar[str] = "tts"

    text: str | None = None


for _shape in (Share, Location, Music, Xml, Json, Tts):
    register(_shape)
