"""Binary content heuristic applied to the first chunk of an item."""

from __future__ import annotations

SAMPLE_SIZE = 512
CONTROL_RATIO = 0.30

# Control bytes that plain text legitimately contains.
_TEXT_CONTROLS = frozenset(b"\t\n\r")


def is_binary(data: bytes) -> bool:
    """Return True if *data* looks like binary content.

    Only the first ``SAMPLE_SIZE`` bytes are inspected. The sample is binary
    if it contains a NUL byte, or if more than 30 % of its bytes are C0
    control characters other than tab, LF and CR. Empty input is text.
    """
    sample = data[:SAMPLE_SIZE]
    if not sample:
        return False
    if b"\x00" in sample:
        return True
    control = sum(1 for b in sample if b < 0x20 and b not in _TEXT_CONTROLS)
    return control > len(sample) * CONTROL_RATIO
