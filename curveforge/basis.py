"""
CurveForge - B-Spline Basisfunktionen
=====================================

Cox-de Boor Rekursion über einem Knotenvektor:

    N_i,0(u) = 1 falls knots[i] <= u < knots[i+1], sonst 0
    N_i,p(u) = (u - k_i) / (k_i+p - k_i) * N_i,p-1(u)
             + (k_i+p+1 - u) / (k_i+p+1 - k_i+1) * N_i+1,p-1(u)

Ein Nenner von exakt 0 (Span der Breite 0) liefert den Beitrag 0 statt
einer Division durch Null.

Zwei Varianten:
- basis(): rekursiv, ein Index - optional mit LRU-Cache ("basis_cache" Flag)
- basis_functions(): iterative Tabelle der Ordnungen 0..degree, alle Indizes
  auf einmal - wird von Kurven- und Flächen-Auswertung verwendet
"""

from functools import lru_cache
from typing import Callable, Optional, Sequence

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from curveforge.errors import InvalidParameterError

_BASIS_CACHE_SIZE = 65536


def _cox_de_boor(u: float, i: int, degree: int, knots: Sequence[float],
                 lower: Callable[[float, int, int], float]) -> float:
    """Ein Rekursionsschritt; `lower(u, i, degree - 1)` liefert die Ordnung darunter."""
    if degree == 0:
        # Halboffenes Intervall, das Domänenende liegt in keinem Intervall
        return 1.0 if knots[i] <= u < knots[i + 1] else 0.0

    result = 0.0

    # Erster Term
    denom1 = knots[i + degree] - knots[i]
    if denom1 != 0:
        result += lower(u, i, degree - 1) * (u - knots[i]) / denom1

    # Zweiter Term
    denom2 = knots[i + degree + 1] - knots[i + 1]
    if denom2 != 0:
        result += lower(u, i + 1, degree - 1) * (knots[i + degree + 1] - u) / denom2

    return result


def _basis_uncached(u: float, i: int, degree: int, knots: Sequence[float]) -> float:
    return _cox_de_boor(u, i, degree, knots,
                        lambda uu, ii, pp: _basis_uncached(uu, ii, pp, knots))


@lru_cache(maxsize=_BASIS_CACHE_SIZE)
def _basis_cached(u: float, i: int, degree: int, knots: tuple) -> float:
    return _cox_de_boor(u, i, degree, knots,
                        lambda uu, ii, pp: _basis_cached(uu, ii, pp, knots))


def basis(u: float, i: int, degree: int, knots: Sequence[float]) -> float:
    """
    Berechnet B-Spline Basisfunktion N_i,degree(u) rekursiv.

    Args:
        u: Parameter
        i: Index des Kontrollpunkts
        degree: Grad (>= 0)
        knots: Knotenvektor, knots[i .. i+degree+1] muss existieren

    Returns:
        Gewicht des Kontrollpunkts i an u
    """
    if degree < 0:
        raise InvalidParameterError(f"Grad muss >= 0 sein, ist {degree}")
    if i < 0 or i + degree + 1 >= len(knots):
        raise InvalidParameterError(
            f"Index {i} mit Grad {degree} außerhalb des Knotenvektors (Länge {len(knots)})"
        )

    if is_enabled("basis_cache"):
        return _basis_cached(float(u), i, degree, tuple(knots))
    return _basis_uncached(u, i, degree, knots)


def clear_basis_cache() -> None:
    """Leert den LRU-Cache der rekursiven Basisfunktion."""
    info = _basis_cached.cache_info()
    _basis_cached.cache_clear()
    logger.debug(f"Basis-Cache geleert (hits={info.hits}, misses={info.misses})")


def basis_functions(u: float, degree: int, knots: Sequence[float],
                    count: Optional[int] = None) -> np.ndarray:
    """
    Berechnet alle Basisfunktionen N_0..N_count-1 an u iterativ.

    Baut die Ordnungen 0..degree als Tabelle auf, gemeinsame Teilterme
    werden dabei nur einmal berechnet. Ergebnis entspricht basis() für
    jeden Index.

    Args:
        u: Parameter
        degree: Grad (>= 0)
        knots: Knotenvektor
        count: Anzahl Kontrollpunkte (default: len(knots) - degree - 1)

    Returns:
        np.ndarray der Länge count
    """
    if degree < 0:
        raise InvalidParameterError(f"Grad muss >= 0 sein, ist {degree}")

    k = np.asarray(knots, dtype=float)
    available = len(k) - degree - 1
    if count is None:
        count = available
    if count < 1 or count > available:
        raise InvalidParameterError(
            f"{count} Basisfunktionen vom Grad {degree} passen nicht zu {len(k)} Knoten"
        )

    # Ordnung 0: Indikator der halboffenen Intervalle
    N = ((k[:-1] <= u) & (u < k[1:])).astype(float)

    for p in range(1, degree + 1):
        width = len(N) - 1
        left_den = k[p:p + width] - k[:width]
        right_den = k[p + 1:p + 1 + width] - k[1:1 + width]

        left = np.zeros(width)
        mask = left_den != 0
        left[mask] = (u - k[:width][mask]) / left_den[mask] * N[:width][mask]

        right = np.zeros(width)
        mask = right_den != 0
        right[mask] = (k[p + 1:p + 1 + width][mask] - u) / right_den[mask] * N[1:][mask]

        N = left + right

    return N[:count]
