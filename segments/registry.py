"""
Segment shape registry.

Each shape module calls ``register()`` at import time.  ``lookup()`` imports
every module in the ``segments/`` package the first time it is asked, via
``pkgutil.iter_modules``, so no central list needs to be maintained: drop a
shape module into ``segments/`` and its tags are live.

Loading is serialized by a lock and only marked done once every module has
been imported, so concurrent first lookups never see a partial registry.
"""

from __future__ import annotations

import importlib
import pkgutil
import threading

_REGISTRY: dict[str, type] = {}
_loaded = False
# Re-entrant: a shape module being imported may itself look up a shape
_load_lock = threading.RLock()


def register(shape: type) -> None:
    """Register *shape* under its ``tag`` (lower case)."""
    tag = shape.tag.lower()
    if not tag:
        raise ValueError(f"{shape.__name__} has no tag")
    _REGISTRY[tag] = shape


def load_all() -> None:
    """Import every shape module in the package (once)."""
    global _loaded
    if _loaded:
        return
    with _load_lock:
        if _loaded:
            return

        import segments as _segments_pkg

        for _, mod_name, _ in pkgutil.iter_modules(_segments_pkg.__path__):
            if mod_name != "registry":
                importlib.import_module(f"segments.{mod_name}")
        _loaded = True


def lookup(tag: str) -> type | None:
    """Return the shape registered for *tag*, or ``None``."""
    load_all()
    return _REGISTRY.get(tag.lower())


def all_shapes() -> dict[str, type]:
    """Return a snapshot of ``{tag: shape}`` for every registered shape."""
    load_all()
    return dict(_REGISTRY)
