"""
Tests für Tensorprodukt-Flächen
===============================

Run: pytest test/test_surface.py -v
"""

import numpy as np
import pytest

from config.feature_flags import set_flag
from curveforge.errors import InvalidParameterError
from curveforge.sources import grid_from_flat, snapshot_grid
from curveforge.basis import basis_functions
from curveforge.knots import build_knots, knot_domain
from curveforge.surface import NURBSSurface, SurfaceType, axis_weights, evaluate_surface


UNIT_SQUARE = [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 0.0, 1.0), (1.0, 1.0, 2.0)]


def _plane_grid(count_u, count_v, z=0.0):
    return [(float(i), float(j), z) for i in range(count_u) for j in range(count_v)]


class TestGrid:

    def test_row_major_layout(self, wave_grid):
        grid = grid_from_flat(np.array(wave_grid), 4)
        assert grid.shape == (4, 5, 3)
        assert tuple(grid[2, 3]) == wave_grid[2 * 5 + 3]

    def test_count_mismatch(self):
        with pytest.raises(InvalidParameterError, match="passt nicht"):
            snapshot_grid(_plane_grid(1, 7), 2)

    def test_surface_rejects_mismatch(self):
        with pytest.raises(InvalidParameterError):
            NURBSSurface(control_points=_plane_grid(1, 7), count_u=2)

    def test_minimum_grid(self):
        with pytest.raises(InvalidParameterError, match="2x2"):
            NURBSSurface(control_points=_plane_grid(1, 4), count_u=1)

    def test_default_count_u(self):
        surface = NURBSSurface(control_points=_plane_grid(5, 4))
        assert (surface.count_u, surface.count_v) == (5, 4)


class TestBilinear:

    def test_corners_and_center(self):
        surface = NURBSSurface(control_points=UNIT_SQUARE, count_u=2)

        assert surface.is_bilinear
        assert surface.knots_u == [] and surface.knots_v == []
        assert surface.point_on_surface(0.0, 0.0, linear=True) == UNIT_SQUARE[0]
        assert surface.point_on_surface(1.0, 1.0, linear=True) == UNIT_SQUARE[3]
        assert surface.point_on_surface(0.5, 0.5, linear=True) == pytest.approx((0.5, 0.5, 0.75))

    def test_linear_clamps_to_unit_square(self):
        grid = grid_from_flat(np.array(UNIT_SQUARE), 2)
        assert evaluate_surface(-1.0, 3.0, grid, linear=True) == evaluate_surface(0.0, 1.0, grid, linear=True)

    def test_linear_mode_on_larger_grid(self):
        grid = grid_from_flat(np.array(_plane_grid(3, 3)), 3)
        assert evaluate_surface(0.25, 0.75, grid, linear=True) == pytest.approx((0.5, 1.5, 0.0))


class TestBasisEvaluation:

    def test_partition_of_unity(self):
        """Konstante Höhe bleibt überall erhalten"""
        surface = NURBSSurface(control_points=_plane_grid(4, 5, z=0.7), count_u=4, degree_u=2, degree_v=3)
        for u in (0.1, 0.4, 0.9):
            for v in (0.05, 0.5, 0.95):
                assert surface.point_on_surface(u, v)[2] == pytest.approx(0.7)

    def test_clamping(self, wave_grid):
        surface = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2)
        start_u, end_u = surface.domain_u
        start_v, end_v = surface.domain_v

        assert surface.point_on_surface(5.0, 5.0) == surface.point_on_surface(end_u, end_v)
        assert surface.point_on_surface(-5.0, -5.0) == surface.point_on_surface(start_u, start_v)

    def test_linear_differs_from_basis(self, wave_grid):
        surface = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2)
        assert surface.point_on_surface(0.3, 0.6, linear=True) != pytest.approx(surface.point_on_surface(0.3, 0.6))

    def test_missing_knots(self, wave_grid):
        grid = grid_from_flat(np.array(wave_grid), 4)
        with pytest.raises(InvalidParameterError):
            evaluate_surface(0.5, 0.5, grid, degree_u=2, degree_v=2)

    def test_degree_too_high(self, wave_grid):
        with pytest.raises(InvalidParameterError):
            NURBSSurface(control_points=wave_grid, count_u=4, degree_u=4, degree_v=2)

    def test_nurbs_type_matches_bspline(self, wave_grid):
        bspline = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2)
        nurbs = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2,
                             surface_type=SurfaceType.NURBS, weights=[2.0] * 20)
        assert nurbs.point_on_surface(0.4, 0.6) == pytest.approx(bspline.point_on_surface(0.4, 0.6))


class TestRationalSurface:

    def test_uniform_weights_no_effect(self, wave_grid):
        set_flag("rational_nurbs", True)
        bspline = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2)
        nurbs = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2,
                             surface_type=SurfaceType.NURBS, weights=[3.0] * 20)
        assert nurbs.point_on_surface(0.4, 0.6) == pytest.approx(bspline.point_on_surface(0.4, 0.6))

    def test_weights_change_geometry(self, wave_grid):
        set_flag("rational_nurbs", True)
        weights = [1.0] * 20
        weights[2 * 5 + 2] = 10.0
        bspline = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2)
        nurbs = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2,
                             surface_type=SurfaceType.NURBS, weights=weights)
        assert nurbs.point_on_surface(0.55, 0.5) != pytest.approx(bspline.point_on_surface(0.55, 0.5))

    def test_weight_count_mismatch(self, wave_grid):
        with pytest.raises(InvalidParameterError):
            NURBSSurface(control_points=wave_grid, count_u=4, surface_type=SurfaceType.NURBS,
                         degree_u=2, degree_v=2, weights=[1.0] * 19)


class TestSurfaceHost:

    def test_control_cage(self, wave_grid):
        surface = NURBSSurface(control_points=wave_grid, count_u=4, degree_u=2, degree_v=2)
        # 4 * (5 - 1) in V + (4 - 1) * 5 in U
        assert len(surface.control_cage()) == 31

    def test_refresh_keeps_knots(self, wave_grid):
        state = {"points": list(wave_grid)}
        surface = NURBSSurface(control_points=lambda: state["points"], count_u=4, degree_u=2, degree_v=2)
        knots_u = surface.knots_u

        state["points"][0] = (0.0, 0.0, 3.0)
        surface.refresh()

        assert surface.knots_u is knots_u
        assert surface.grid[0, 0, 2] == 3.0

    def test_refresh_grid_change(self, wave_grid):
        state = {"points": list(wave_grid)}
        surface = NURBSSurface(control_points=lambda: state["points"], count_u=4, degree_u=2, degree_v=2)

        state["points"] = wave_grid + _plane_grid(1, 4)
        surface.refresh()

        assert surface.count_v == 6
        assert len(surface.knots_v) == 6 + 2 + 1

    def test_rebuild_error(self, wave_grid):
        state = {"points": list(wave_grid)}
        surface = NURBSSurface(control_points=lambda: state["points"], count_u=4, degree_u=2, degree_v=2)

        state["points"] = wave_grid[:-1]
        result = surface.rebuild()

        assert result.is_error
        assert surface.grid.shape == (4, 5, 3)


class TestDomainEnd:

    def test_degree_zero_upper_bound(self):
        points = [(float(i), float(j), 0.25 * i * j) for i in range(3) for j in range(3)]
        surface = NURBSSurface(control_points=points, count_u=3, degree_u=0, degree_v=0)

        assert surface.point_on_surface(1.0, 0.5) == (2.0, 1.0, 0.5)
        assert surface.point_on_surface(0.5, 1.0) == (1.0, 2.0, 0.5)

    def test_axis_weights_one_hot_at_end(self):
        knots = build_knots(4, 2)
        _, end = knot_domain(knots, 2)
        assert list(axis_weights(end, 2, knots, 4)) == [0.0, 0.0, 0.0, 1.0]
        assert list(axis_weights(0.5, 2, knots, 4)) == pytest.approx(list(basis_functions(0.5, 2, knots, 4)))


class TestBilinearHost:

    def test_default_evaluation_is_bilinear(self):
        """2x2 Grid mit Grad 3: keine Knoten, trotzdem auswertbar"""
        surface = NURBSSurface(control_points=UNIT_SQUARE, count_u=2)
        assert surface.point_on_surface(0.5, 0.5) == pytest.approx((0.5, 0.5, 0.75))
        assert surface.point_on_surface(1.0, 0.0) == UNIT_SQUARE[2]

    def test_linear_degree_keeps_basis_path(self):
        """2x2 Grid mit Grad 1 hat Knoten und nutzt die Basisfunktionen"""
        surface = NURBSSurface(control_points=UNIT_SQUARE, count_u=2, degree_u=1, degree_v=1)
        assert surface.knots_u and surface.knots_v
        assert surface.point_on_surface(0.5, 0.5) == pytest.approx((0.5, 0.5, 0.75))
