"""
CurveForge - Tangenten-Frame auf Kurven
=======================================

Position + Tangente an einem Kurvenparameter per finiter Differenz.
Die Tangente zeigt immer in Richtung wachsender Parameter.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
from loguru import logger

from config.tolerances import Tolerances
from curveforge.sources import Point3D, as_point


@dataclass(frozen=True)
class CurveFrame:
    """
    Orientierter Frame an einer Kurvenposition.

    Die Ebene geht durch `position` und hat `tangent` als Normale
    (Ebenengleichung: dot(normal, x) + distance = 0).
    """
    position: Point3D
    tangent: Point3D

    @property
    def normal(self) -> Point3D:
        return self.tangent

    @property
    def distance(self) -> float:
        return -float(np.dot(self.tangent, self.position))

    @property
    def plane(self) -> Tuple[Point3D, float]:
        """(normal, distance) der Frame-Ebene."""
        return self.normal, self.distance


def estimate_frame(evaluate: Callable[[float], Point3D], u: float,
                   upper: float = 1.0, step: Optional[float] = None) -> CurveFrame:
    """
    Schätzt Position und Tangente an u.

    Vorwärtsdifferenz im Inneren; liegt u + step auf oder hinter der oberen
    Domänengrenze, Rückwärtsdifferenz. Es wird nie außerhalb der Domäne
    ausgewertet.

    Args:
        evaluate: Kurvenauswertung u -> (x, y, z)
        u: Kurvenparameter
        upper: obere Grenze der Parameterdomäne
        step: Schrittweite (default: Tolerances.FRAME_STEP)

    Returns:
        CurveFrame mit normierter Tangente
    """
    if step is None:
        step = Tolerances.FRAME_STEP

    position = np.array(evaluate(u), dtype=float)

    if u + step >= upper:
        pos0 = np.array(evaluate(u - step), dtype=float)
        pos1 = position
    else:
        pos0 = position
        pos1 = np.array(evaluate(u + step), dtype=float)

    delta = pos1 - pos0
    length = np.linalg.norm(delta)

    if length < Tolerances.EPSILON_MATH:
        logger.warning(f"Tangente an u={u:.6f} degeneriert (Kurve lokal konstant)")
        tangent = np.zeros(3)
    else:
        tangent = delta / length

    return CurveFrame(position=as_point(position), tangent=as_point(tangent))
