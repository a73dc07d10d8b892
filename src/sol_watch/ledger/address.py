"""Address encoding — Base58 decoding and Solana public key validation."""

from __future__ import annotations

_B58_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

PUBKEY_LENGTH = 32


def base58_decode(s: str) -> bytes:
    """Decode a Base58 string to raw bytes (no checksum).

    Raises:
        ValueError: If *s* contains a character outside the Base58 alphabet.
    """
    n = 0
    for char in s:
        index = _B58_ALPHABET.find(char.encode("ascii", errors="replace"))
        if index < 0:
            msg = f"Invalid Base58 character: {char!r}"
            raise ValueError(msg)
        n = n * 58 + index
    result = n.to_bytes((n.bit_length() + 7) // 8, "big") if n > 0 else b""
    # Leading '1' chars encode 0x00 bytes
    pad_count = 0
    for char in s:
        if char == "1":
            pad_count += 1
        else:
            break
    return b"\x00" * pad_count + result


def validate_address(address: str) -> bool:
    """Check if *address* is a Base58-encoded 32-byte Solana public key."""
    candidate = address.strip()
    if not candidate or len(candidate) > 44:
        return False
    try:
        return len(base58_decode(candidate)) == PUBKEY_LENGTH
    except ValueError:
        return False


def normalize_address(address: str) -> str:
    """Return the canonical form of *address* (surrounding whitespace removed)."""
    return address.strip()
