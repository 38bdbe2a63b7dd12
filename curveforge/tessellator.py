"""
CurveForge - Flächen-Tessellierung
==================================

Tastet eine Fläche auf einem regelmäßigen Parametergitter ab und erzeugt ein
Dreiecksnetz (Vertices + Dreiecks-Indizes).

- 2x2 Grid: bilinear über [0, 1]², ohne Knoten/Basis-Maschinerie
- sonst:    Basisfunktionen über die Knotendomäne; am oberen Domänenende
            zählt in der jeweiligen Richtung nur die letzte Kontrollpunkt-
            Zeile/-Spalte, die letzte Ecke ist exakt der letzte Kontrollpunkt

Vertex (i, j) liegt an Index i * (num_v + 1) + j.
Vertices = (num_u + 1)(num_v + 1), Dreiecke = 2 * num_u * num_v.

Bounding-Box, Normalen und Buffer-Upload sind Sache des Hosts; to_polydata()
liefert bei Bedarf ein pyvista.PolyData.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from curveforge.curve import validate_resolution
from curveforge.errors import InvalidParameterError
from curveforge.knots import knot_domain
from curveforge.sources import Point3D, as_point
from curveforge.surface import SurfaceType, axis_weights, blend_grid
from curveforge.weights import CurveType, blend_weights


@dataclass
class SurfaceMesh:
    """
    Dreiecksnetz einer tessellierten Fläche.

    Attributes:
        vertices: (N, 3) Vertex-Positionen
        triangles: flache Index-Liste, je 3 Indizes ein Dreieck
        num_u: Zellen in U-Richtung
        num_v: Zellen in V-Richtung
    """
    vertices: np.ndarray
    triangles: np.ndarray
    num_u: int
    num_v: int

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles) // 3

    @property
    def faces(self) -> np.ndarray:
        """Dreiecke als (T, 3) Index-Array."""
        return self.triangles.reshape(-1, 3)

    def vertex(self, i: int, j: int) -> Point3D:
        """Vertex an Gitterposition (i, j)."""
        return as_point(self.vertices[i * (self.num_v + 1) + j])

    def bounds(self) -> Tuple[Point3D, Point3D]:
        """Achsenparallele Bounding-Box (min, max)."""
        return as_point(self.vertices.min(axis=0)), as_point(self.vertices.max(axis=0))

    def to_polydata(self):
        """
        Konvertiert zu pyvista.PolyData.

        Returns:
            pyvista.PolyData mit Dreiecks-Faces
        """
        try:
            import pyvista as pv
        except ImportError as e:
            logger.error(f"PyVista nicht verfügbar: {e}")
            raise

        faces = np.hstack([np.full((self.triangle_count, 1), 3, dtype=np.int64),
                           self.faces.astype(np.int64)])
        return pv.PolyData(self.vertices, faces.ravel())


def grid_triangles(num_u: int, num_v: int, flip_diagonal: bool = False) -> np.ndarray:
    """
    Zwei Dreiecke pro Gitterzelle mit konsistenter Orientierung.

    Zelle (i, j) mit a = (i, j), b = (i+1, j), c = (i, j+1), d = (i+1, j+1):
    - Standard:      (a, b, c), (b, d, c)
    - flip_diagonal: (a, c, b), (b, c, d)
    """
    stride = num_v + 1
    triangles = []
    for i in range(num_u):
        for j in range(num_v):
            a = i * stride + j
            b = (i + 1) * stride + j
            c = i * stride + j + 1
            d = (i + 1) * stride + j + 1
            if flip_diagonal:
                triangles.extend((a, c, b, b, c, d))
            else:
                triangles.extend((a, b, c, b, d, c))
    return np.array(triangles, dtype=np.int64)


def _grid_parameters(start: float, end: float, resolution: float) -> List[float]:
    """num + 1 Parameter von start bis exakt end."""
    length = end - start
    num = max(1, math.ceil(length / resolution))
    return [end if i == num else start + length * i / num for i in range(num + 1)]


def tessellate_bilinear(grid: np.ndarray, resolution: float) -> SurfaceMesh:
    """
    Bilineare Tessellierung eines 2x2 Grids über [0, 1]².

    Flächentyp, Grad und Gewichte spielen keine Rolle.
    """
    validate_resolution(resolution)
    grid = np.asarray(grid, dtype=float)

    params = _grid_parameters(0.0, 1.0, resolution)
    weights_u = np.array([blend_weights(CurveType.POLYLINE, u, grid.shape[0]) for u in params])
    weights_v = np.array([blend_weights(CurveType.POLYLINE, v, grid.shape[1]) for v in params])

    points = np.einsum('ai,bj,ijk->abk', weights_u, weights_v, grid)
    num = len(params) - 1

    return SurfaceMesh(
        vertices=points.reshape(-1, 3),
        triangles=grid_triangles(num, num),
        num_u=num,
        num_v=num
    )


def tessellate_bspline(grid: np.ndarray, degree_u: int, degree_v: int,
                       knots_u: Sequence[float], knots_v: Sequence[float],
                       resolution: float,
                       surface_type: SurfaceType = SurfaceType.BSPLINE,
                       weights: Optional[Sequence[float]] = None) -> SurfaceMesh:
    """
    Tessellierung über die Knotendomäne.

    num_u = ceil(Domänenlänge_u / resolution), num_v analog. Die letzte
    Zeile/Spalte liegt auf der oberen Domänengrenze (siehe axis_weights), die Ecke
    (num_u, num_v) ist der letzte Kontrollpunkt des Grids.
    """
    validate_resolution(resolution)
    grid = np.asarray(grid, dtype=float)
    count_u, count_v = grid.shape[0], grid.shape[1]

    if knots_u is None or knots_v is None or len(knots_u) == 0 or len(knots_v) == 0:
        raise InvalidParameterError("Tessellierung benötigt Knotenvektoren in U und V")

    params_u = _grid_parameters(*knot_domain(knots_u, degree_u), resolution)
    params_v = _grid_parameters(*knot_domain(knots_v, degree_v), resolution)

    weights_u = np.array([axis_weights(u, degree_u, knots_u, count_u) for u in params_u])
    weights_v = np.array([axis_weights(v, degree_v, knots_v, count_v) for v in params_v])

    points = blend_grid(weights_u, weights_v, grid, surface_type, weights)
    # Netz schließt exakt an der Ecke des Kontrollnetzes
    points[-1, -1] = grid[-1, -1]

    num_u, num_v = len(params_u) - 1, len(params_v) - 1
    return SurfaceMesh(
        vertices=points.reshape(-1, 3),
        triangles=grid_triangles(num_u, num_v, flip_diagonal=True),
        num_u=num_u,
        num_v=num_v
    )


def tessellate(surface) -> SurfaceMesh:
    """
    Tesselliert eine NURBSSurface komplett neu.

    Returns:
        SurfaceMesh mit (num_u + 1)(num_v + 1) Vertices und 2 * num_u * num_v Dreiecken
    """
    if surface.is_bilinear:
        mesh = tessellate_bilinear(surface.grid, surface.resolution)
    else:
        mesh = tessellate_bspline(
            surface.grid,
            surface.degree_u, surface.degree_v,
            surface.knots_u, surface.knots_v,
            surface.resolution,
            surface_type=surface.surface_type,
            weights=surface.weights
        )

    if is_enabled("evaluation_debug"):
        logger.debug(f"Tessellierung: {mesh.num_u}x{mesh.num_v} Zellen, "
                     f"{mesh.vertex_count} Vertices, {mesh.triangle_count} Dreiecke")
    return mesh
