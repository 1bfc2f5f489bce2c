# Plain text run.
#
# The only bare shape: its inline form is the text itself (no brackets, no
# escaping), while its JSON form is the usual {"type":"text","data":{...}}.

from typing import ClassVar

from segments import Segment
from segments.registry import register


class Text(Segment):
    tag: ClassVar[str] = "text"
    bare: ClassVar[bool] = True

    text: str | None = None

    def __init__(self, text: str | None = None, **data):
        super().__init__(text=text, **data)


register(Text)
