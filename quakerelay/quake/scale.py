"""JMA seismic intensity codes and their display labels."""

from __future__ import annotations

# Ordered low -> high.
_SCALE_LABELS: dict[int, str] = {
    10: "1",
    20: "2",
    30: "3",
    40: "4",
    45: "5 weak",
    50: "5 strong",
    55: "6 weak",
    60: "6 strong",
    70: "7",
}

def decode_scale(code: int) -> tuple[str, bool]:
    """Return ``(label, found)`` for a raw intensity code.

    Unknown codes (including the feed's ``-1`` "unknown" marker and the
    ``46`` "5 weak or above, estimated" code) yield ``("", False)``.
    """
    label = _SCALE_LABELS.get(code)
    if label is None:
        return "", False
    return label, True


def is_known_scale(code: int) -> bool:
    return code in _SCALE_LABELS
