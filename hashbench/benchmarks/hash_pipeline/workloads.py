"""Fixed hash-field workload: one batch of unique keys, fields and values.

The batch is generated once and replayed unchanged by every trial, so string
construction never lands inside a timing window.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import DEFAULT_KEY_FILLER, FIELD_PREFIX, VALUE_PREFIX


@dataclass(frozen=True)
class Operation:
    """One batch slot: the hash key plus the field/value written into it."""

    key: str
    field: str
    value: str


Workload = tuple[Operation, ...]


# ---------------------------------------------------------------------------
# Slot builders
# ---------------------------------------------------------------------------

def generate_key(filler: str, target_length: int, index: int) -> str:
    """Return a key of *target_length* characters ending in *index*.

    The key starts with *filler* and is padded one character at a time with
    the last character of *filler* until only the digits of *index* are
    missing.  If the target is too short to hold ``filler + str(index)`` the
    key is that string, longer than requested.
    """
    suffix = str(index)
    padding = max(0, target_length - len(suffix) - len(filler))
    return filler + filler[-1] * padding + suffix


def generate_field(index: int) -> str:
    return f"{FIELD_PREFIX}{index}"


def generate_value(index: int) -> str:
    return f"{VALUE_PREFIX}{index}"


def build_workload(
    batch_size: int,
    key_size: int,
    filler: str = DEFAULT_KEY_FILLER,
) -> Workload:
    """Build the *batch_size* operations every trial replays, in slot order."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    if key_size < 1:
        raise ValueError(f"key_size must be >= 1, got {key_size}")
    if not filler:
        raise ValueError("filler must be a non-empty string")
    if any(c.isdigit() for c in filler):
        # Digits in the padding would let two indexes produce the same key.
        raise ValueError(f"filler must not contain digits, got {filler!r}")

    return tuple(
        Operation(
            key=generate_key(filler, key_size, i),
            field=generate_field(i),
            value=generate_value(i),
        )
        for i in range(batch_size)
    )
