# Media segments: images, voice, short video and card images.
#
# ``file`` accepts a file name returned by the backend, an absolute
# file:// URI, an http(s) URL or base64://<data>.  ``cache``/``proxy`` only
# matter when the backend downloads from a URL.

from typing import ClassVar

from pydantic import Field

from segments import Segment
from segments.registry import register


class Image(Segment):
    tag: ClassVar[str] = "image"

    file: str | None = None
    type_: str | None = Field(default=None, alias="type")          # flash / show
    sub_type: str | None = Field(default=None, alias="subType")    # 0 normal, 1 sticker, ...
    url: str | None = None
    cache: bool | None = None
    id: int | None = None       # effect id for type=show, 40000-40005
    c: int | None = None        # download threads


class Record(Segment):
    """Voice message."""
    tag: ClassVar[str] = "record"

    file: str | None = None
    magic: bool | None = None   # voice changer
    url: str | None = None
    cache: bool | None = None
    proxy: bool | None = None
    timeout: int | None = None  # seconds


class Video(Segment):
    tag: ClassVar[str] = "video"

    file: str | None = None
    cover: str | None = None    # jpg only
    c: int | None = None


class CardImage(Segment):
    """Large image sent as an XML card."""
    tag: ClassVar[str] = "cardimage"

    file: str | None = None
    minwidth: int | None = None
    minheight: int | None = None
    maxwidth: int | None = None
    maxheight: int | None = None
    source: str | None = None
    icon: str | None = None


for _shape in (Image, Record, Video, CardImage):
    register(_shape)
