"""
CurveForge - Knotenvektoren
===========================

Synthese eines (fast) geklemmten, monoton steigenden Knotenvektors aus
Kontrollpunkt-Anzahl und Grad.

Aufbau für order = degree + 1, Länge = count + order:
- Die ersten `order` Knoten steigen von 0 in Schritten von KNOT_INCREMENT
- Die letzten `order` Knoten fallen spiegelbildlich auf exakt 1.0 zu
- Innere Knoten sind gleichverteilt: k / (count - degree), k = 1, 2, ...

Randknoten sind paarweise verschieden, die Cox-de Boor Rekursion sieht
am Rand keine Spans der Breite 0.
"""

from typing import List, Sequence, Tuple

from config.tolerances import Tolerances
from curveforge.errors import InvalidParameterError


def build_knots(count: int, degree: int) -> List[float]:
    """
    Erstellt den Knotenvektor für `count` Kontrollpunkte vom Grad `degree`.

    Args:
        count: Anzahl Kontrollpunkte in dieser Richtung
        degree: Polynomgrad in dieser Richtung

    Returns:
        Knotenvektor der Länge count + degree + 1

    Raises:
        InvalidParameterError: degree < 0 oder count < degree + 1
    """
    if degree < 0:
        raise InvalidParameterError(f"Grad muss >= 0 sein, ist {degree}")
    if count < degree + 1:
        raise InvalidParameterError(
            f"Mindestens {degree + 1} Kontrollpunkte für Grad {degree} erforderlich, habe {count}"
        )

    order = degree + 1
    length = count + order
    increment = Tolerances.KNOT_INCREMENT
    knots = []

    for i in range(length):
        if i < order:
            knots.append(i * increment)
        elif i >= length - order:
            # Spiegel der Anfangsrampe, letzter Knoten exakt 1.0
            knots.append(1.0 - (length - 1 - i) * increment)
        else:
            knots.append((i - order + 1) / (count - degree))

    return knots


def knot_domain(knots: Sequence[float], degree: int) -> Tuple[float, float]:
    """Gültiger Parameterbereich [knots[degree], knots[len - degree - 1]]."""
    return knots[degree], knots[len(knots) - degree - 1]


def domain_length(knots: Sequence[float], degree: int) -> float:
    """Länge der Parameterdomäne eines Knotenvektors."""
    start, end = knot_domain(knots, degree)
    return end - start


def validate_knots(knots: Sequence[float], count: int, degree: int) -> None:
    """
    Prüft Länge und Monotonie eines (ggf. extern gelieferten) Knotenvektors.

    Raises:
        InvalidParameterError: Länge != count + degree + 1 oder fallende Knoten
    """
    expected = count + degree + 1
    if len(knots) != expected:
        raise InvalidParameterError(f"Knotenvektor muss {expected} Elemente haben, hat {len(knots)}")

    for i in range(1, len(knots)):
        if knots[i] < knots[i - 1]:
            raise InvalidParameterError(
                f"Knotenvektor fällt an Index {i}: {knots[i - 1]} > {knots[i]}"
            )


def factorial(v: int) -> float:
    """Fakultät als float (für Bernstein-Koeffizienten)."""
    f = 1.0
    for i in range(v, 1, -1):
        f *= i
    return f
