"""
Accumulating field validator.

Collects one failure message per field so that a whole request can be
checked before anything is reported back.
"""

from __future__ import annotations

import re
from typing import Hashable

# Email pattern recommended by the WHATWG HTML living standard.
EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class Validator:
    """Map of field name to the first failure recorded for it."""

    def __init__(self) -> None:
        self.errors: dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, key: str, message: str) -> None:
        """Record *message* for *key* unless the key already failed."""
        self.errors.setdefault(key, message)

    def check(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_error(key, message)


def permitted_value(value: Hashable, *permitted: Hashable) -> bool:
    """Exact membership test, no prefix or substring matching."""
    return value in permitted


def not_in(value: Hashable, *blocked: Hashable) -> bool:
    return value not in blocked


def matches(value: str, rx: re.Pattern) -> bool:
    return rx.fullmatch(value) is not None

