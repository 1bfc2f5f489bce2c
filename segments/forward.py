# Forwarded messages.
#
# ``forward`` references a stored forward bundle by id.  ``node`` is one entry
# of a bundle being sent: either a reference to an existing message (``id``)
# or a custom entry whose ``content`` is itself a whole message.  ``content``
# and ``seq`` are the only recursive fields in the catalog; in the JSON
# notation they are arrays of segments, in the inline notation they carry the
# nested message's own inline text (escaped like any other value).
#
# An empty nested message has no inline text of its own, so it decodes from
# ``content=`` as a message holding one empty text run, like any empty input.
# The JSON notation keeps it empty (``"content":[]``).

from typing import ClassVar

from cqcode.message import Message
from segments import Segment
from segments.registry import register


class Forward(Segment):
    tag: ClassVar[str] = "forward"

    id: int | None = None


class ForwardNode(Segment):
    tag: ClassVar[str] = "node"

    id: int | None = None
    name: str | None = None     # sender name shown in the bundle
    uin: int | None = None      # sender id shown in the bundle
    content: Message | None = None
    seq: Message | None = None


for _shape in (Forward, ForwardNode):
    register(_shape)
