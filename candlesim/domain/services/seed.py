"""
CandleSim – Domain Service: Seed Derivation
=============================================
Símbolo → seed uint32 con FNV-1a (32 bits).

Determinista, total y sensible al orden: cada carácter contribuye.
Solo aritmética entera → estable entre plataformas.
"""

from __future__ import annotations

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
UINT32_MASK = 0xFFFFFFFF

DEFAULT_SYMBOL = "SYMBOL"


def hash_symbol(symbol: str) -> int:
    """FNV-1a sobre los code points del texto, truncado a 32 bits en cada paso."""
    h = FNV_OFFSET_BASIS
    for ch in symbol:
        h = ((h ^ ord(ch)) * FNV_PRIME) & UINT32_MASK
    return h


def seed_for_symbol(symbol: str) -> int:
    """Seed de un símbolo; un símbolo vacío usa 'SYMBOL'."""
    return hash_symbol(symbol or DEFAULT_SYMBOL)
