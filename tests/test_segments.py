"""Tests for the segment catalog and registry."""

import json

import pytest

from cqcode.message import Message, RawSegment
from segments import Segment, registry
from segments.forward import Forward, ForwardNode
from segments.media import CardImage, Image, Record, Video
from segments.rich import Json, Location, Music, Share, Tts, Xml
from segments.social import (
    Anonymous,
    At,
    Contact,
    Dice,
    Face,
    Gift,
    Poke,
    RedBag,
    Reply,
    Rps,
    Shake,
)
from segments.text import Text


SAMPLES = [
    Face(id=14),
    Record(file="voice.amr", magic=False, url="https://example.com/a.amr", cache=True, proxy=False, timeout=30),
    Video(file="https://example.com/v.mp4", cover="file:///tmp/c.jpg", c=2),
    At(qq="all"),
    At(qq="10001", name="Bob, the [builder]"),
    Rps(),
    Dice(),
    Shake(),
    Anonymous(ignore=True),
    Share(url="https://example.com/?q=a&r=b", title="Title", content="x,y", image="https://example.com/i.png"),
    Contact(type_="group", id="123456"),
    Location(lon=116.397128, lat=39.916527, title="Beijing", content="天安门"),
    Music(type_="custom", url="https://example.com", audio="https://example.com/a.mp3", title="Song"),
    Image(file="base64://aGVsbG8=", type_="show", sub_type="0", url="https://example.com/i.png", cache=False, id=40000, c=3),
    Reply(id=-12345),
    Reply(text="quoted, text", qq=10001, time=1700000000, seq=5),
    RedBag(title="恭喜发财"),
    Poke(qq=10001),
    Gift(qq=10001, id=8),
    Forward(id=99),
    Xml(data='<?xml version="1.0"?><msg serviceID="1" a="[x]"/>', resid=1),
    Json(data='{"app":"com.tencent.miniapp","view":"all"}', resid=0),
    CardImage(file="https://example.com/big.png", minwidth=400, minheight=400, maxwidth=500, maxheight=1000, source="src", icon="i"),
    Tts(text="hello"),
    ForwardNode(id=123),
    ForwardNode(name="hello", uin=456, content=Message.of(Face(id=123), Text("world"))),
    ForwardNode(name="n", content=Message.of(Text("a&b,c")), seq=Message.of(Face(id=1))),
]


def _ids(sample):
    return sample.to_string()[:40]


class TestRoundTrip:
    """Every catalog shape survives both notations unchanged."""

    @pytest.mark.parametrize("segment", SAMPLES, ids=_ids)
    def test_inline(self, segment):
        assert type(segment).from_string(segment.to_string()) == segment

    @pytest.mark.parametrize("segment", SAMPLES, ids=_ids)
    def test_json(self, segment):
        assert type(segment).from_json(segment.to_json()) == segment

    @pytest.mark.parametrize("shape", [s for s in registry.all_shapes().values() if not s.bare])
    def test_all_absent(self, shape):
        empty = shape()
        assert empty.to_string() == f"[CQ:{shape.tag}]"
        assert empty.to_json() == f'{{"type":"{shape.tag}","data":{{}}}}'
        assert shape.from_string(f"[CQ:{shape.tag}]") == empty
        assert shape.from_json(empty.to_json()) == empty


class TestText:
    def test_inline_is_bare(self):
        assert Text("a,b[c]&d").to_string() == "a,b[c]&d"

    def test_inline_decode_is_verbatim(self):
        assert Text.from_string("[CQ:face,id=1]") == Text("[CQ:face,id=1]")

    def test_json(self):
        assert Text("hi").to_json() == '{"type":"text","data":{"text":"hi"}}'
        assert Text.from_json('{"type":"text","data":{"text":"hi"}}') == Text("hi")

    def test_keyword_construction(self):
        assert Text(text="x") == Text("x")


class TestForwardNode:
    """The recursive shape: content/seq hold whole messages."""

    def test_to_json_with_messages(self):
        t = ForwardNode(
            name="hello",
            uin=456,
            content=Message.of(Face(id=123)),
            seq=Message.of(Face(id=456)),
        )
        assert t.to_json() == (
            '{"type":"node","data":{"name":"hello","uin":456,'
            '"content":[{"type":"face","data":{"id":123}}],'
            '"seq":[{"type":"face","data":{"id":456}}]}}'
        )

    def test_to_json_nested_text(self):
        t = ForwardNode(
            name="hello",
            uin=456,
            content=Message.of(Face(id=123), Text("world"), Face(id=456)),
        )
        assert t.to_json() == (
            '{"type":"node","data":{"name":"hello","uin":456,"content":['
            '{"type":"face","data":{"id":123}},'
            '{"type":"text","data":{"text":"world"}},'
            '{"type":"face","data":{"id":456}}]}}'
        )

    def test_content_is_json_array(self, node):
        data = json.loads(node.to_json())["data"]
        assert data["content"] == [
            {"type": "face", "data": {"id": 123}},
            {"type": "text", "data": {"text": "world"}},
        ]

    def test_from_json_recovers_message(self, node, face_and_text):
        decoded = ForwardNode.from_json(node.to_json())
        assert len(decoded.content) == 2
        assert decoded.content == face_and_text
        assert decoded.seq is None

    def test_from_json_only_id(self):
        t = ForwardNode.from_json('{"type":"node","data":{"id":123}}')
        assert t.id == 123
        assert t.name is None
        assert t.uin is None
        assert t.content is None
        assert t.seq is None

    def test_inline_escapes_nested_message(self, node):
        assert node.to_string() == (
            "[CQ:node,name=hello,uin=456,content=&#91;CQ:face&#44;id=123&#93;world]"
        )

    def test_inline_decode_resolves_nested(self, node):
        decoded = ForwardNode.from_string(node.to_string())
        assert decoded.content[0] == Face(id=123)
        assert decoded.content[1] == Text("world")

    def test_node_inside_node(self, node):
        outer = ForwardNode(name="outer", content=Message.of(node, Text("tail")))
        assert ForwardNode.from_string(outer.to_string()) == outer
        assert ForwardNode.from_json(outer.to_json()) == outer

    def test_content_must_be_array(self):
        from cqcode.error import FieldTypeError
        with pytest.raises(FieldTypeError):
            ForwardNode.from_json('{"type":"node","data":{"content":"[CQ:face,id=1]"}}')

    def test_unknown_nested_segment_stays_raw(self):
        t = ForwardNode.from_string("[CQ:node,content=&#91;CQ:mystery&#44;x=1&#93;]")
        assert t.content[0] == RawSegment("[CQ:mystery,x=1]", "mystery", "string")

    def test_empty_content(self):
        t = ForwardNode(content=Message())
        assert t.to_string() == "[CQ:node,content=]"
        assert ForwardNode.from_string(t.to_string()).content == Message.of(Text(""))
        assert t.to_json() == '{"type":"node","data":{"content":[]}}'
        assert ForwardNode.from_json(t.to_json()) == t


class TestRegistry:
    def test_lookup(self):
        assert registry.lookup("face") is Face
        assert registry.lookup("node") is ForwardNode
        assert registry.lookup("text") is Text
        assert registry.lookup("cardimage") is CardImage

    def test_lookup_case_insensitive(self):
        assert registry.lookup("FACE") is Face

    def test_lookup_unknown(self):
        assert registry.lookup("unknownthing") is None

    def test_all_shapes_are_segments(self):
        shapes = registry.all_shapes()
        assert len(shapes) == 24
        for tag, shape in shapes.items():
            assert issubclass(shape, Segment)
            assert shape.tag == tag
            assert tag == tag.lower()

    def test_register_requires_tag(self):
        class Nameless(Segment):
            pass

        with pytest.raises(ValueError):
            registry.register(Nameless)
