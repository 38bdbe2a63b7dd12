"""
CurveForge - Blend-Gewichte ("Fader") pro Kontrollpunkt
=======================================================

Jeder Kurventyp definiert ein Gewicht w_i(u) pro Kontrollpunkt.
Die Kurvenposition ist Σ_i P_i * w_i(u).

- POLYLINE: Hut-Funktion über u * (n - 1)
- BEZIER:   Bernstein-Polynom C(n,i) u^i (1-u)^(n-i)
- BSPLINE:  Cox-de Boor Basisfunktion
- NURBS:    wie BSPLINE (Gewichte siehe Feature-Flag "rational_nurbs")
"""

import math
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from curveforge.basis import basis, basis_functions
from curveforge.knots import factorial


class CurveType(Enum):
    """Kurventypen; bestimmt die Blend-Regel."""
    POLYLINE = 0
    BEZIER = 1
    BSPLINE = 2
    NURBS = 3

    @property
    def uses_knots(self) -> bool:
        """True für Typen die über einen Knotenvektor ausgewertet werden."""
        return self in (CurveType.BSPLINE, CurveType.NURBS)


def polyline_weight(u: float, i: int, count: int) -> float:
    """
    Hut-Funktion für Polylinien.

    u wird auf [0, count - 1] skaliert; die beiden benachbarten Indizes
    teilen sich das Gewicht linear. Bei ganzzahligem u * n erhält genau
    ein Index das Gewicht 1.
    """
    n = count - 1
    x = u * n
    lower = math.floor(x)
    upper = math.ceil(x)

    if i == lower:
        return 1.0 if upper == x else upper - x
    if i == upper:
        return 1.0 if lower == x else x - lower
    return 0.0


def bezier_weight(u: float, i: int, count: int) -> float:
    """Bernstein-Gewicht C(n,i) u^i (1-u)^(n-i) mit n = count - 1."""
    n = count - 1
    # 0.0 ** 0 == 1.0: Endpunkte bekommen exakt Gewicht 1
    return (u ** i) * ((1.0 - u) ** (n - i)) * factorial(n) / (factorial(i) * factorial(n - i))


def bspline_weight(u: float, i: int, degree: int, knots: Sequence[float]) -> float:
    """B-Spline Gewicht = Basisfunktion N_i,degree(u)."""
    return basis(u, i, degree, knots)


def blend_weight(curve_type: CurveType, u: float, i: int, count: int,
                 degree: int = 0, knots: Optional[Sequence[float]] = None) -> float:
    """Gewicht von Kontrollpunkt i an u für den gegebenen Kurventyp."""
    if curve_type == CurveType.POLYLINE:
        return polyline_weight(u, i, count)
    if curve_type == CurveType.BEZIER:
        return bezier_weight(u, i, count)
    return bspline_weight(u, i, degree, knots)


def blend_weights(curve_type: CurveType, u: float, count: int,
                  degree: int = 0, knots: Optional[Sequence[float]] = None) -> np.ndarray:
    """Alle Gewichte w_0..w_count-1 an u als Array."""
    if curve_type.uses_knots:
        return basis_functions(u, degree, knots, count)
    return np.array([blend_weight(curve_type, u, i, count) for i in range(count)])
