"""SKU normalization used by the fuzzy matching tier.

Responsibilities of this stage:
- derive one deterministic lookup key per SKU
- collapse case and punctuation variants of the same SKU onto one key
"""

from __future__ import annotations

import re

_NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]")


def normalize_sku(value: str | None) -> str:
    """Uppercase ``value`` and drop every character outside ``A-Z0-9``.

    ``"ab-12"``, ``"AB12"`` and ``"Ab_12"`` all normalize to ``"AB12"``. The
    function is idempotent. Non-ASCII letters are dropped after uppercasing.
    """

    if not value:
        return ""
    return _NON_ALPHANUMERIC.sub("", value.upper())
