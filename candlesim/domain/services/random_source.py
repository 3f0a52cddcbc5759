"""
CandleSim – Domain Service: Deterministic Random Source
=========================================================
Generador Mulberry32: secuencia Weyl (estado += constante impar) mezclada
con xor-shifts y multiplicaciones de 32 bits.

Para un seed fijo la secuencia es idéntica bit a bit entre procesos y
plataformas: las fixtures de test por símbolo dependen de ello.
No es criptográfico.
"""

from __future__ import annotations

UINT32_MASK = 0xFFFFFFFF
WEYL_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Multiplicación entera de 32 bits (resultado sin signo)."""
    return (a * b) & UINT32_MASK


class RandomSource:
    """Fuente uniforme en [0, 1) re-sembrable."""

    __slots__ = ("_seed", "_state", "_draws")

    def __init__(self, seed: int) -> None:
        self._seed = seed & UINT32_MASK
        self._state = self._seed
        self._draws = 0

    @classmethod
    def create(cls, seed: int) -> "RandomSource":
        return cls(seed)

    def next(self) -> float:
        """Siguiente valor en [0, 1); avanza el estado."""
        self._state = (self._state + WEYL_INCREMENT) & UINT32_MASK
        t = self._state
        r = _imul(t ^ (t >> 15), 1 | t)
        r ^= (r + _imul(r ^ (r >> 7), 61 | r)) & UINT32_MASK
        self._draws += 1
        return (r ^ (r >> 14)) / _TWO_POW_32

    __call__ = next

    def reseed(self, seed: int) -> None:
        self._seed = seed & UINT32_MASK
        self._state = self._seed
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        """Cantidad de valores consumidos desde el último seed."""
        return self._draws
