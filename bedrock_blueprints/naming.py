from __future__ import annotations

import uuid

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
ID_BYTES = 16
ID_LENGTH = 22
SUFFIX_LENGTH = 12


def encode_16bytes_base58(raw: bytes) -> str:
    if not isinstance(raw, (bytes, bytearray)) or len(raw) != ID_BYTES:
        raise ValueError("base58 id encoder requires exactly 16 bytes")
    n = int.from_bytes(raw, "big")
    chars: list[str] = []
    while n > 0:
        n, rem = divmod(n, 58)
        chars.append(BASE58_ALPHABET[rem])
    encoded = "".join(reversed(chars)) if chars else BASE58_ALPHABET[0]
    if len(encoded) > ID_LENGTH:
        raise ValueError("base58 encoded id exceeds fixed 22-char width")
    return (BASE58_ALPHABET[0] * (ID_LENGTH - len(encoded))) + encoded


def stable_base58_22(*parts: str) -> str:
    """Deterministic id for the given name parts (uuid5 in the URL namespace)."""
    if not parts or not all(isinstance(p, str) and p for p in parts):
        raise ValueError("stable id requires at least one non-empty name part")
    return encode_16bytes_base58(uuid.uuid5(uuid.NAMESPACE_URL, "/".join(parts)).bytes)


def short_suffix(*parts: str, length: int = SUFFIX_LENGTH) -> str:
    # Trailing chars carry the most entropy; leading ones are often zero-padding.
    if length < 1 or length > ID_LENGTH:
        raise ValueError(f"suffix length must be between 1 and {ID_LENGTH}")
    return stable_base58_22(*parts)[-length:]
