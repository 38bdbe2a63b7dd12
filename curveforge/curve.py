"""
CurveForge - Kurven-Auswertung
==============================

Polylinie, Bézier, B-Spline und NURBS aus einer geordneten Menge von
Kontrollpunkten:

    C(u) = Σ_i P_i * w_i(u)

Verwendung:
    from curveforge.curve import NURBSCurve, CurveType

    curve = NURBSCurve(
        control_points=[(0, 0, 0), (1, 2, 0), (2, 0, 0), (3, 1, 0)],
        curve_type=CurveType.BSPLINE,
        degree=3
    )
    point = curve.point_on_curve(0.5)
    polyline = curve.update_curve()

Parameterdomäne:
- POLYLINE / BEZIER: [0, 1]
- BSPLINE / NURBS:   [knots[degree], knots[len - degree - 1]]

Parameter außerhalb der Domäne werden geklemmt. Am oberen Ende der
B-Spline-Domäne liegt der Parameter in keinem halboffenen Basis-Intervall,
dort wird exakt der letzte Kontrollpunkt geliefert.
"""

import colorsys
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from curveforge.errors import InvalidParameterError
from curveforge.frame import CurveFrame, estimate_frame
from curveforge.knots import build_knots, knot_domain, validate_knots
from curveforge.result_types import OperationResult
from curveforge.sources import ControlPointSource, Point3D, as_point, snapshot_points
from curveforge.weights import CurveType, blend_weights

Color = Tuple[float, float, float]


def validate_resolution(resolution: float) -> None:
    """Auflösung muss in (0, 1] liegen."""
    if not (0.0 < resolution <= 1.0):
        raise InvalidParameterError(f"Auflösung muss in (0, 1] liegen, ist {resolution}")


def curve_domain(curve_type: CurveType, degree: int = 0,
                 knots: Optional[Sequence[float]] = None) -> Tuple[float, float]:
    """Parameterdomäne des Kurventyps."""
    if curve_type.uses_knots:
        if knots is None:
            raise InvalidParameterError(f"{curve_type.name} benötigt einen Knotenvektor")
        return knot_domain(knots, degree)
    return 0.0, 1.0


def _blend(points: np.ndarray, w: np.ndarray, curve_type: CurveType,
           weights: Optional[Sequence[float]]) -> np.ndarray:
    """Gewichtete Summe; rational nur für NURBS mit aktivem Flag."""
    if curve_type == CurveType.NURBS and weights is not None and len(weights) > 0 \
            and is_enabled("rational_nurbs"):
        wn = w * np.asarray(weights, dtype=float)
        denominator = wn.sum()
        if abs(denominator) >= Tolerances.EPSILON_MATH:
            return wn @ points / denominator
    return w @ points


def evaluate_curve(u: float, control_points, curve_type: CurveType,
                   degree: int = 0, knots: Optional[Sequence[float]] = None,
                   weights: Optional[Sequence[float]] = None) -> Point3D:
    """
    Evaluiert die Kurve an Parameter u.

    Args:
        u: Parameter (wird in die Domäne des Kurventyps geklemmt)
        control_points: (n, 3) Kontrollpunkte
        curve_type: Blend-Regel
        degree: Grad (nur BSPLINE/NURBS)
        knots: Knotenvektor (nur BSPLINE/NURBS)
        weights: NURBS-Gewichte (nur mit Flag "rational_nurbs" angewendet)

    Returns:
        Punkt (x, y, z) auf der Kurve
    """
    points = np.asarray(control_points, dtype=float)
    count = len(points)
    if count < 1:
        raise InvalidParameterError("Mindestens 1 Kontrollpunkt erforderlich")

    start, end = curve_domain(curve_type, degree, knots)
    u = max(start, min(end, u))

    if curve_type.uses_knots and u >= end:
        return as_point(points[-1])

    w = blend_weights(curve_type, u, count, degree, knots)
    return as_point(_blend(points, w, curve_type, weights))


def _sample_parameters(curve_type: CurveType, resolution: float, degree: int,
                       knots: Optional[Sequence[float]]) -> List[float]:
    """Gleichverteilte Parameter über die Domäne, inklusive beider Enden."""
    validate_resolution(resolution)
    start, end = curve_domain(curve_type, degree, knots)
    length = end - start
    steps = max(1, math.ceil(length / resolution))
    return [end if i == steps else start + length * i / steps for i in range(steps + 1)]


def sample_curve(control_points, curve_type: CurveType, resolution: float,
                 degree: int = 0, knots: Optional[Sequence[float]] = None,
                 weights: Optional[Sequence[float]] = None) -> List[Point3D]:
    """
    Diskretisiert die Kurve komplett neu.

    Schrittanzahl = ceil(Domänenlänge / resolution), Ergebnis hat
    Schritte + 1 Punkte in Parameter-Reihenfolge. Bei BSPLINE/NURBS ist der
    letzte Punkt exakt der letzte Kontrollpunkt.
    """
    points = np.asarray(control_points, dtype=float)
    params = _sample_parameters(curve_type, resolution, degree, knots)

    samples = [evaluate_curve(u, points, curve_type, degree, knots, weights) for u in params]

    if is_enabled("evaluation_debug"):
        logger.debug(f"{curve_type.name}: {len(samples)} Samples aus {len(points)} Kontrollpunkten")
    return samples


def curve_weights(count: int, curve_type: CurveType, resolution: float,
                  degree: int = 0, knots: Optional[Sequence[float]] = None
                  ) -> List[List[Tuple[float, float]]]:
    """
    Gewichtsverläufe pro Kontrollpunkt (nur zur Visualisierung).

    Returns:
        Für jeden Kontrollpunkt k eine Liste von (u, w_k(u)) über dieselben
        Parameter wie sample_curve()
    """
    params = _sample_parameters(curve_type, resolution, degree, knots)
    _, end = curve_domain(curve_type, degree, knots)

    table = []
    for u in params:
        if curve_type.uses_knots and u >= end:
            # Gleiche Regel wie die Auswertung: letzter Kontrollpunkt exakt
            w = np.zeros(count)
            w[-1] = 1.0
        else:
            w = blend_weights(curve_type, u, count, degree, knots)
        table.append(w)

    return [[(u, float(w[k])) for u, w in zip(params, table)] for k in range(count)]


@dataclass
class NURBSCurve:
    """
    Auswertbare Kurve über einer Kontrollpunkt-Quelle.

    Attributes:
        control_points: Punkte [(x, y, z), ...] oder Callable das sie liefert
        curve_type: Blend-Regel (default: POLYLINE)
        degree: Polynomgrad für BSPLINE/NURBS (default: 3 = kubisch)
        resolution: Sampling-Schrittweite in (0, 1]
        weights: NURBS-Gewichte (optional, siehe Flag "rational_nurbs")
        knots: Knotenvektor (default: build_knots(count, degree))
    """
    control_points: ControlPointSource
    curve_type: CurveType = CurveType.POLYLINE
    degree: int = Tolerances.DEFAULT_DEGREE
    resolution: float = Tolerances.DEFAULT_RESOLUTION
    weights: List[float] = field(default_factory=list)
    knots: List[float] = field(default_factory=list)

    def __post_init__(self):
        validate_resolution(self.resolution)
        if self.degree < 0:
            raise InvalidParameterError(f"Grad muss >= 0 sein, ist {self.degree}")

        self._points = snapshot_points(self.control_points)
        self._configure(self.knots)

        if self.weights and self.curve_type == CurveType.NURBS and not is_enabled("rational_nurbs"):
            logger.warning("NURBS-Gewichte werden ignoriert (Auswertung wie B-Spline, Flag 'rational_nurbs' aus)")

    def _configure(self, knots: Sequence[float]) -> None:
        """Knotenvektor und Gewichte gegen die aktuelle Punktanzahl prüfen."""
        count = self.count

        if self.weights and len(self.weights) != count:
            raise InvalidParameterError(f"Anzahl Gewichte ({len(self.weights)}) != Kontrollpunkte ({count})")

        if not self.curve_type.uses_knots:
            self.knots = list(knots)
            return

        if knots:
            validate_knots(knots, count, self.degree)
            self.knots = list(knots)
        else:
            self.knots = build_knots(count, self.degree)

    @property
    def points(self) -> np.ndarray:
        """Aktueller Schnappschuss der Kontrollpunkte (n, 3)."""
        return self._points

    @property
    def count(self) -> int:
        return len(self._points)

    @property
    def domain(self) -> Tuple[float, float]:
        return curve_domain(self.curve_type, self.degree, self.knots)

    def refresh(self) -> np.ndarray:
        """
        Holt die Kontrollpunkte neu von der Quelle.

        Der Knotenvektor bleibt erhalten, solange sich die Anzahl nicht ändert.
        """
        points = snapshot_points(self.control_points)
        if len(points) != self.count:
            logger.info(f"Kontrollpunkt-Anzahl {self.count} -> {len(points)}, Knotenvektor wird neu erstellt")
            previous = self._points
            self._points = points
            try:
                self._configure([])
            except InvalidParameterError:
                self._points = previous
                raise
        else:
            self._points = points
        return self._points

    def point_on_curve(self, u: float) -> Point3D:
        """Punkt auf der Kurve an u."""
        return evaluate_curve(u, self._points, self.curve_type, self.degree, self.knots, self.weights)

    def frame_on_curve(self, u: float) -> CurveFrame:
        """Punkt und Tangenten-Ebene an u (u wird in die Domäne geklemmt)."""
        start, end = self.domain
        u = max(start, min(end, u))
        return estimate_frame(self.point_on_curve, u, upper=end)

    def update_curve(self) -> List[Point3D]:
        """Komplette Neu-Diskretisierung mit der eingestellten Auflösung."""
        return sample_curve(self._points, self.curve_type, self.resolution,
                            self.degree, self.knots, self.weights)

    def get_faders(self) -> Tuple[List[Point3D], List[Color]]:
        """
        Gewichtsverläufe aller Kontrollpunkte für Debug-Visualisierung.

        Returns:
            (samples, colors): samples als (u, w, 0), Farbe pro Sample mit
            Farbton k / count je Kontrollpunkt k
        """
        samples = []
        colors = []
        curves = curve_weights(self.count, self.curve_type, self.resolution, self.degree, self.knots)

        for k, fader in enumerate(curves):
            color = colorsys.hsv_to_rgb(k / self.count, 1.0, 1.0)
            for u, w in fader:
                samples.append((u, w, 0.0))
                colors.append(color)

        return samples, colors

    def rebuild(self) -> OperationResult:
        """Quelle neu lesen und Kurve komplett neu berechnen."""
        try:
            self.refresh()
            points = self.update_curve()
        except InvalidParameterError as e:
            return OperationResult.error(f"{self.curve_type.name}-Kurve ungültig", exception=e)
        return OperationResult.success(points, f"{len(points)} Kurvenpunkte berechnet")
