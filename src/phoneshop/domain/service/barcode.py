"""Barcodes for stock units.

Format: ``PH`` + millisecond timestamp (13 digits) + 4 random digits,
e.g. ``PH17078308000011234``.
"""

from __future__ import annotations

import random
import re
import time

_BARCODE_RE = re.compile(r"^PH\d{17}$")


def generate_barcode() -> str:
    timestamp = int(time.time() * 1000)
    return f"PH{timestamp}{random.randint(1000, 9999)}"


def generate_barcodes(count: int) -> list[str]:
    """Generate *count* barcodes that are distinct from one another."""
    codes: list[str] = []
    while len(codes) < count:
        code = generate_barcode()
        if code not in codes:
            codes.append(code)
    return codes


def is_valid_barcode(barcode: str) -> bool:
    return bool(_BARCODE_RE.match(barcode))
