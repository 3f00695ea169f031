from __future__ import annotations

import re
from typing import Optional

_AU_MOBILE_RE = re.compile(r"^04\d{8}$")


def normalize_au_mobile(raw: Optional[str]) -> Optional[str]:
    """Normalise an Australian mobile number to ``04XXXXXXXX``.

    Accepts ``+61 4xx``, ``614xx``, ``04xx`` and ``4xx`` (missing leading zero)
    with any spacing or punctuation. Returns None when the input is not a
    mobile number.
    """
    if not raw:
        return None

    digits = re.sub(r"\D+", "", str(raw))
    if digits.startswith("61") and len(digits) == 11:
        digits = "0" + digits[2:]
    elif len(digits) == 9 and digits.startswith("4"):
        digits = "0" + digits

    if not _AU_MOBILE_RE.match(digits):
        return None
    return digits
