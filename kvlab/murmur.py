"""MurmurHash3, x64 128-bit variant."""

from __future__ import annotations

import struct

_MASK64 = (1 << 64) - 1
_C1 = 0x87C37B91114253D5
_C2 = 0x4CF5AD432745937F


def _rotl64(x: int, r: int) -> int:
    return ((x << r) | (x >> (64 - r))) & _MASK64


def _fmix64(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK64
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK64
    k ^= k >> 33
    return k


def _mix_k1(k1: int) -> int:
    k1 = (k1 * _C1) & _MASK64
    k1 = _rotl64(k1, 31)
    return (k1 * _C2) & _MASK64


def _mix_k2(k2: int) -> int:
    k2 = (k2 * _C2) & _MASK64
    k2 = _rotl64(k2, 33)
    return (k2 * _C1) & _MASK64


def murmurhash3_x64_128(data: bytes, seed: int = 0) -> tuple[int, int]:
    """Hash ``data`` and return the two 64-bit halves ``(h1, h2)``."""
    data = bytes(data)
    length = len(data)
    body_end = (length // 16) * 16
    h1 = h2 = seed & 0xFFFFFFFF

    for k1, k2 in struct.iter_unpack("<QQ", data[:body_end]):
        h1 ^= _mix_k1(k1)
        h1 = _rotl64(h1, 27)
        h1 = (h1 + h2) & _MASK64
        h1 = (h1 * 5 + 0x52DCE729) & _MASK64

        h2 ^= _mix_k2(k2)
        h2 = _rotl64(h2, 31)
        h2 = (h2 + h1) & _MASK64
        h2 = (h2 * 5 + 0x38495AB5) & _MASK64

    tail = data[body_end:]
    if len(tail) > 8:
        h2 ^= _mix_k2(int.from_bytes(tail[8:], "little"))
    if tail:
        h1 ^= _mix_k1(int.from_bytes(tail[:8], "little"))

    h1 ^= length
    h2 ^= length

    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64

    h1 = _fmix64(h1)
    h2 = _fmix64(h2)

    h1 = (h1 + h2) & _MASK64
    h2 = (h2 + h1) & _MASK64
    return h1, h2


def murmur_words(data: bytes, seed: int = 0) -> tuple[int, int, int, int]:
    """Hash ``data`` and return the result as four little-endian 32-bit words."""
    h1, h2 = murmurhash3_x64_128(data, seed)
    return (
        h1 & 0xFFFFFFFF,
        h1 >> 32,
        h2 & 0xFFFFFFFF,
        h2 >> 32,
    )