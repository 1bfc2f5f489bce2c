"""Pytest configuration and shared fixtures."""

import pytest

from cqcode.message import Message
from segments.forward import ForwardNode
from segments.social import Face
from segments.text import Text


@pytest.fixture
def face_and_text():
    """A two-token message: a face followed by plain text."""
    return Message.of(Face(id=123), Text("world"))


@pytest.fixture
def node(face_and_text):
    """A custom forward node carrying a nested message."""
    return ForwardNode(name="hello", uin=456, content=face_and_text)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the config search directory at an empty temp dir."""
    monkeypatch.setenv("CQCODE_DATA_PATH", str(tmp_path))
    return tmp_path
