"""
CurveForge - Tensorprodukt-Flächen
==================================

B-Spline/NURBS-Flächen über einem zeilenweise abgelegten Kontrollpunkt-Grid:

    S(u, v) = Σ_i Σ_j P_ij * w_i(u) * w_j(v)

Zwei Gewichtungsmodi:
- linear=True:  Polylinien-Hut-Funktion je Richtung (bilineare Interpolation
                für das 2x2 Grid, unabhängig vom Flächentyp)
- linear=False: Cox-de Boor Basisfunktionen je Richtung

Verwendung:
    from curveforge.surface import NURBSSurface

    surface = NURBSSurface(control_points=flat_points, count_u=4,
                           degree_u=2, degree_v=2, resolution=0.05)
    mesh = surface.update_surface()
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances
from curveforge.basis import basis_functions
from curveforge.curve import validate_resolution
from curveforge.errors import InvalidParameterError
from curveforge.knots import build_knots, knot_domain, validate_knots
from curveforge.result_types import OperationResult
from curveforge.sources import ControlPointSource, Point3D, as_point, snapshot_grid
from curveforge.weights import CurveType, blend_weights


class SurfaceType(Enum):
    """Flächentypen; NURBS teilt sich die Auswertung mit BSPLINE."""
    BSPLINE = 0
    NURBS = 2


def blend_grid(weights_u: np.ndarray, weights_v: np.ndarray, grid: np.ndarray,
               surface_type: SurfaceType = SurfaceType.BSPLINE,
               weights: Optional[Sequence[float]] = None) -> np.ndarray:
    """
    Tensorprodukt-Summe für mehrere Parameter auf einmal.

    Args:
        weights_u: (A, count_u) Gewichte je u-Parameter
        weights_v: (B, count_v) Gewichte je v-Parameter
        grid: (count_u, count_v, 3) Kontrollpunkte
        surface_type: NURBS + Flag "rational_nurbs" aktiviert Gewichtung
        weights: flache NURBS-Gewichte (row-major, count_u * count_v)

    Returns:
        (A, B, 3) Flächenpunkte
    """
    plain = np.einsum('ai,bj,ijk->abk', weights_u, weights_v, grid)

    if surface_type != SurfaceType.NURBS or weights is None or len(weights) == 0 \
            or not is_enabled("rational_nurbs"):
        return plain

    w = np.asarray(weights, dtype=float).reshape(grid.shape[0], grid.shape[1])
    numerator = np.einsum('ai,bj,ij,ijk->abk', weights_u, weights_v, w, grid)
    denominator = np.einsum('ai,bj,ij->ab', weights_u, weights_v, w)

    valid = np.abs(denominator) >= Tolerances.EPSILON_MATH
    safe = np.where(valid, denominator, 1.0)
    return np.where(valid[..., None], numerator / safe[..., None], plain)


def axis_weights(t: float, degree: int, knots: Sequence[float], count: int) -> np.ndarray:
    """
    Basisgewichte einer Flächenrichtung an t.

    Am oberen Domänenende (t >= end) erhält der letzte Kontrollpunkt das
    Gewicht 1, wie bei Kurven. Beim Grad 0 läge t == end sonst in keinem
    halboffenen Intervall.
    """
    _, end = knot_domain(knots, degree)
    if t >= end:
        w = np.zeros(count)
        w[-1] = 1.0
        return w
    return basis_functions(t, degree, knots, count)


def evaluate_surface(u: float, v: float, grid, surface_type: SurfaceType = SurfaceType.BSPLINE,
                     degree_u: int = 0, degree_v: int = 0,
                     knots_u: Optional[Sequence[float]] = None,
                     knots_v: Optional[Sequence[float]] = None,
                     linear: bool = False,
                     weights: Optional[Sequence[float]] = None) -> Point3D:
    """
    Evaluiert Fläche an (u, v).

    Args:
        u: Parameter in U-Richtung
        v: Parameter in V-Richtung
        grid: (count_u, count_v, 3) Kontrollpunkte
        linear: bilineare Hut-Funktionen statt Basisfunktionen

    Returns:
        Punkt (x, y, z) auf der Fläche
    """
    grid = np.asarray(grid, dtype=float)
    if grid.ndim != 3 or grid.shape[2] != 3:
        raise InvalidParameterError(f"Grid muss (count_u, count_v, 3) sein, Form ist {grid.shape}")
    count_u, count_v = grid.shape[0], grid.shape[1]

    if linear:
        u = max(0.0, min(1.0, u))
        v = max(0.0, min(1.0, v))
        wu = blend_weights(CurveType.POLYLINE, u, count_u)
        wv = blend_weights(CurveType.POLYLINE, v, count_v)
        return as_point(np.einsum('i,j,ijk->k', wu, wv, grid))

    if knots_u is None or knots_v is None or len(knots_u) == 0 or len(knots_v) == 0:
        raise InvalidParameterError("Basis-Auswertung benötigt Knotenvektoren in U und V")

    # Klemmen in die Domäne, außerhalb wären alle Basisfunktionen 0
    start_u, end_u = knot_domain(knots_u, degree_u)
    start_v, end_v = knot_domain(knots_v, degree_v)
    u = max(start_u, min(end_u, u))
    v = max(start_v, min(end_v, v))

    wu = axis_weights(u, degree_u, knots_u, count_u)
    wv = axis_weights(v, degree_v, knots_v, count_v)
    return as_point(blend_grid(wu[None, :], wv[None, :], grid, surface_type, weights)[0, 0])


@dataclass
class NURBSSurface:
    """
    Auswertbare Tensorprodukt-Fläche über einer Kontrollpunkt-Quelle.

    Attributes:
        control_points: flache, zeilenweise Punkte oder Callable das sie liefert
        count_u: Kontrollpunkte in U-Richtung; count_v = Gesamt / count_u
        degree_u: Polynomgrad in U-Richtung
        degree_v: Polynomgrad in V-Richtung
        surface_type: BSPLINE oder NURBS
        resolution: Sampling-Schrittweite in (0, 1]
        weights: flache NURBS-Gewichte (optional)
        knots_u: Knotenvektor in U-Richtung (default: build_knots)
        knots_v: Knotenvektor in V-Richtung (default: build_knots)
    """
    control_points: ControlPointSource
    count_u: int = Tolerances.DEFAULT_COUNT_U
    degree_u: int = Tolerances.DEFAULT_DEGREE
    degree_v: int = Tolerances.DEFAULT_DEGREE
    surface_type: SurfaceType = SurfaceType.BSPLINE
    resolution: float = Tolerances.DEFAULT_RESOLUTION
    weights: List[float] = field(default_factory=list)
    knots_u: List[float] = field(default_factory=list)
    knots_v: List[float] = field(default_factory=list)

    def __post_init__(self):
        validate_resolution(self.resolution)
        if self.degree_u < 0 or self.degree_v < 0:
            raise InvalidParameterError(f"Grad muss >= 0 sein, ist ({self.degree_u}, {self.degree_v})")

        self._grid = self._snapshot()
        self._configure(self.knots_u, self.knots_v)

        if self.weights and self.surface_type == SurfaceType.NURBS and not is_enabled("rational_nurbs"):
            logger.warning("NURBS-Gewichte werden ignoriert (Auswertung wie B-Spline, Flag 'rational_nurbs' aus)")

    def _snapshot(self) -> np.ndarray:
        grid = snapshot_grid(self.control_points, self.count_u)
        if grid.shape[0] < 2 or grid.shape[1] < 2:
            raise InvalidParameterError(f"Mindestens 2x2 Kontrollpunkte erforderlich, habe {grid.shape[0]}x{grid.shape[1]}")
        return grid

    def _configure(self, knots_u: Sequence[float], knots_v: Sequence[float]) -> None:
        count_u, count_v = self.count_u, self.count_v

        if self.weights and len(self.weights) != count_u * count_v:
            raise InvalidParameterError(
                f"Anzahl Gewichte ({len(self.weights)}) != Kontrollpunkte ({count_u * count_v})"
            )

        self.knots_u = self._axis_knots(knots_u, count_u, self.degree_u)
        self.knots_v = self._axis_knots(knots_v, count_v, self.degree_v)

    def _axis_knots(self, knots: Sequence[float], count: int, degree: int) -> List[float]:
        if knots:
            validate_knots(knots, count, degree)
            return list(knots)
        if self.is_bilinear and count < degree + 1:
            # 2x2 Grid wird bilinear tesselliert, Knoten werden nicht gebraucht
            return []
        return build_knots(count, degree)

    @property
    def grid(self) -> np.ndarray:
        """Aktueller Schnappschuss als (count_u, count_v, 3)."""
        return self._grid

    @property
    def count_v(self) -> int:
        return self._grid.shape[1]

    @property
    def is_bilinear(self) -> bool:
        """2x2 Grid: wird immer exakt bilinear interpoliert."""
        return self.count_u == 2 and self.count_v == 2

    @property
    def domain_u(self) -> Tuple[float, float]:
        return knot_domain(self.knots_u, self.degree_u) if self.knots_u else (0.0, 1.0)

    @property
    def domain_v(self) -> Tuple[float, float]:
        return knot_domain(self.knots_v, self.degree_v) if self.knots_v else (0.0, 1.0)

    def refresh(self) -> np.ndarray:
        """
        Holt die Kontrollpunkte neu von der Quelle.

        Knotenvektoren bleiben erhalten, solange sich die Grid-Größe nicht ändert.
        """
        grid = self._snapshot()
        if grid.shape != self._grid.shape:
            logger.info(f"Grid {self._grid.shape[:2]} -> {grid.shape[:2]}, Knotenvektoren werden neu erstellt")
            previous = self._grid
            self._grid = grid
            try:
                self._configure([], [])
            except InvalidParameterError:
                self._grid = previous
                raise
        else:
            self._grid = grid
        return self._grid

    def point_on_surface(self, u: float, v: float, linear: bool = False) -> Point3D:
        """Punkt auf der Fläche an (u, v). Ein 2x2 Grid ohne Knoten ist immer bilinear."""
        if self.is_bilinear and not (self.knots_u and self.knots_v):
            linear = True
        return evaluate_surface(u, v, self._grid, self.surface_type,
                                self.degree_u, self.degree_v, self.knots_u, self.knots_v,
                                linear=linear, weights=self.weights)

    def update_surface(self):
        """Komplette Neu-Tessellierung mit der eingestellten Auflösung."""
        from curveforge.tessellator import tessellate
        return tessellate(self)

    def control_cage(self) -> List[Tuple[Point3D, Point3D]]:
        """Liniensegmente zwischen benachbarten Kontrollpunkten in U und V."""
        segments = []
        for i in range(self.count_u):
            for j in range(self.count_v):
                p = as_point(self._grid[i, j])
                if i < self.count_u - 1:
                    segments.append((p, as_point(self._grid[i + 1, j])))
                if j < self.count_v - 1:
                    segments.append((p, as_point(self._grid[i, j + 1])))
        return segments

    def rebuild(self) -> OperationResult:
        """Quelle neu lesen und Fläche komplett neu tessellieren."""
        try:
            self.refresh()
            mesh = self.update_surface()
        except InvalidParameterError as e:
            return OperationResult.error(f"{self.surface_type.name}-Fläche ungültig", exception=e)
        return OperationResult.success(
            mesh, f"{mesh.vertex_count} Vertices, {mesh.triangle_count} Dreiecke berechnet"
        )
