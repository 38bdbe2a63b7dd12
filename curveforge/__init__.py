"""
CurveForge - Parametrische Kurven und Flächen
=============================================

Auswertung von Polylinien, Bézier-, B-Spline- und NURBS-Kurven sowie
Tensorprodukt-Flächen aus Kontrollpunkten; Ausgabe als Punktfolgen und
Dreiecksnetze.

Verwendung:
    from curveforge import NURBSCurve, CurveType

    curve = NURBSCurve(control_points=[(0, 0, 0), (1, 2, 0), (2, 0, 0)],
                       curve_type=CurveType.BEZIER)
    points = curve.update_curve()
"""

from curveforge.errors import InvalidParameterError
from curveforge.knots import build_knots, knot_domain, domain_length, validate_knots, factorial
from curveforge.basis import basis, basis_functions, clear_basis_cache
from curveforge.weights import (
    CurveType, polyline_weight, bezier_weight, bspline_weight, blend_weight, blend_weights
)
from curveforge.sources import ControlPointSource, Point3D, snapshot_points, snapshot_grid, grid_from_flat
from curveforge.frame import CurveFrame, estimate_frame
from curveforge.curve import NURBSCurve, evaluate_curve, sample_curve, curve_weights
from curveforge.surface import NURBSSurface, SurfaceType, evaluate_surface, blend_grid, axis_weights
from curveforge.tessellator import (
    SurfaceMesh, tessellate, tessellate_bilinear, tessellate_bspline, grid_triangles
)
from curveforge.result_types import OperationResult, ResultStatus

__all__ = [
    "InvalidParameterError",
    "build_knots", "knot_domain", "domain_length", "validate_knots", "factorial",
    "basis", "basis_functions", "clear_basis_cache",
    "CurveType", "polyline_weight", "bezier_weight", "bspline_weight", "blend_weight", "blend_weights",
    "ControlPointSource", "Point3D", "snapshot_points", "snapshot_grid", "grid_from_flat",
    "CurveFrame", "estimate_frame",
    "NURBSCurve", "evaluate_curve", "sample_curve", "curve_weights",
    "NURBSSurface", "SurfaceType", "evaluate_surface", "blend_grid", "axis_weights",
    "SurfaceMesh", "tessellate", "tessellate_bilinear", "tessellate_bspline", "grid_triangles",
    "OperationResult", "ResultStatus",
]
