from __future__ import annotations

import hashlib
import re
import secrets

from ..core.constants import KIOSK_KEY_BYTES

WORDS_A = (
    "ember", "river", "forest", "silver", "tiger", "comet", "anchor", "sunset",
    "pebble", "granite", "cedar", "willow", "quartz", "harbor", "aurora", "summit",
)
WORDS_B = (
    "bright", "quiet", "swift", "brave", "calm", "bold", "clear", "true",
    "prime", "steady", "amber", "lucky", "noble", "vivid", "rapid", "sturdy",
)
WORDS_C = (
    "flame", "ridge", "haven", "sprint", "pulse", "crest", "trail", "spark",
    "grove", "delta", "blaze", "peak", "drift", "flare", "dawn", "stone",
)


def normalize_passphrase(value: str | None) -> str:
    text = str(value or "").strip().lower()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"[^a-z0-9-]", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def generate_passphrase() -> str:
    """Human friendly ``word-word-word-NNNN`` invite phrase."""
    words = [secrets.choice(WORDS_A), secrets.choice(WORDS_B), secrets.choice(WORDS_C)]
    number = str(1000 + secrets.randbelow(9000))
    return normalize_passphrase("-".join(words + [number]))


def hash_passphrase(phrase: str, *, pepper: str) -> str:
    canonical = normalize_passphrase(phrase)
    return hashlib.sha256(f"{pepper}:{canonical}".encode("utf-8")).hexdigest()


def random_kiosk_key() -> str:
    return secrets.token_hex(KIOSK_KEY_BYTES)
