"""
CurveForge - Kontrollpunkt-Quellen
==================================

Die Auswertung besitzt keine Kontrollpunkte, sie holt sich bei Bedarf einen
Schnappschuss (Pull-Modell). Eine Quelle ist entweder

- eine Sequenz von (x, y, z) Punkten, oder
- ein Callable ohne Argumente, das eine solche Sequenz liefert.

Änderungserkennung und Cache-Invalidierung liegen beim Host.
"""

from typing import Callable, Sequence, Tuple, Union

import numpy as np

from curveforge.errors import InvalidParameterError

Point3D = Tuple[float, float, float]
ControlPointSource = Union[Sequence[Point3D], Callable[[], Sequence[Point3D]]]


def snapshot_points(source: ControlPointSource) -> np.ndarray:
    """
    Holt einen unveränderlichen Schnappschuss der Kontrollpunkte.

    Returns:
        np.ndarray der Form (n, 3), schreibgeschützt

    Raises:
        InvalidParameterError: leere Quelle oder Punkte nicht dreidimensional
    """
    raw = source() if callable(source) else source
    points = np.array(raw, dtype=float)

    if points.size == 0:
        raise InvalidParameterError("Mindestens 1 Kontrollpunkt erforderlich")
    if points.ndim != 2 or points.shape[1] != 3:
        raise InvalidParameterError(f"Kontrollpunkte müssen (x, y, z) sein, Form ist {points.shape}")

    points.setflags(write=False)
    return points


def snapshot_grid(source: ControlPointSource, count_u: int) -> np.ndarray:
    """
    Holt einen Schnappschuss eines zeilenweise (row-major) abgelegten Grids.

    Index-Konvention wie beim Host: flat[i * count_v + j] == grid[i][j].

    Returns:
        np.ndarray der Form (count_u, count_v, 3)

    Raises:
        InvalidParameterError: count_u * count_v != Gesamtanzahl
    """
    points = snapshot_points(source)
    return grid_from_flat(points, count_u)


def grid_from_flat(points: np.ndarray, count_u: int) -> np.ndarray:
    """Formt (n, 3) Punkte in ein (count_u, count_v, 3) Grid um."""
    total = len(points)
    if count_u < 1:
        raise InvalidParameterError(f"count_u muss >= 1 sein, ist {count_u}")

    count_v = total // count_u
    if count_v < 1 or count_u * count_v != total:
        raise InvalidParameterError(
            f"Grid {count_u} x {count_v} passt nicht zu {total} Kontrollpunkten"
        )

    grid = np.asarray(points, dtype=float).reshape(count_u, count_v, 3)
    grid.setflags(write=False)
    return grid


def as_point(p) -> Point3D:
    """Konvertiert einen numpy-Vektor zu einem (x, y, z) Tupel."""
    return (float(p[0]), float(p[1]), float(p[2]))
