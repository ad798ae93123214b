"""Human readable capacity strings."""

import re
from decimal import Decimal

from cephprov.core.exceptions import ValidationError

_UNITS = {
    "": 0,
    "B": 0,
    "K": 1,
    "M": 2,
    "G": 3,
    "T": 4,
    "P": 5,
}

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGTP]?)(I?B)?\s*$", re.IGNORECASE)

# Largest value a signed 64-bit byte count (pool quota, device size) can hold
MAX_SIZE_BYTES = 2 ** 63 - 1


def parse_size(size: str) -> int:
    """Convert a capacity string such as ``"100GB"`` or ``"1.5 TiB"`` to bytes.

    Units are binary multiples of 1024 regardless of the ``i`` infix. A bare
    number is a byte count. Fractional values use decimal arithmetic and the
    result is truncated to whole bytes.

    Raises:
        ValidationError: If the string is not a capacity or exceeds ``MAX_SIZE_BYTES``
    """
    match = _SIZE_RE.match(size or "")
    if not match:
        raise ValidationError(f"Invalid size: '{size}'", field="size")

    value, unit, suffix = match.groups()
    unit = unit.upper()
    # "iB" with no multiplier ("10iB") is not a unit
    if suffix and suffix.upper() == "IB" and not unit:
        raise ValidationError(f"Invalid size: '{size}'", field="size")

    size_bytes = int(Decimal(value) * (1024 ** _UNITS[unit]))
    if size_bytes > MAX_SIZE_BYTES:
        raise ValidationError(f"Size too large: '{size}'", field="size", details={"max_bytes": MAX_SIZE_BYTES})
    return size_bytes


def format_bytes(bytes_value: float) -> str:
    """Format bytes into human-readable string.

    Args:
        bytes_value: Number of bytes

    Returns:
        Formatted string (e.g., "1.50 TB")
    """
    for unit in ["B", "KB", "MB", "GB", "TB", "PB"]:
        if bytes_value < 1024.0:
            return f"{bytes_value:.2f} {unit}"
        bytes_value /= 1024.0
    return f"{bytes_value:.2f} EB"
