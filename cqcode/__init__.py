# Core of the CQ message codec: escaping, the generic segment codec, the
# Message container and the tokenizer.  Segment shapes live in ``segments``.
#
# Submodules are imported explicitly (``import cqcode.tokenizer``); nothing is
# pulled in here because ``segments`` and ``cqcode.message`` import each other.
