"""
Tests für Tangenten-Frames
==========================

Run: pytest test/test_frame.py -v
"""

import pytest

from curveforge.curve import NURBSCurve
from curveforge.frame import CurveFrame, estimate_frame
from curveforge.weights import CurveType


@pytest.fixture
def line():
    return NURBSCurve(control_points=[(0.0, 0.0, 0.0), (2.0, 0.0, 0.0)], curve_type=CurveType.POLYLINE)


class TestEstimateFrame:

    def test_straight_line(self, line):
        frame = line.frame_on_curve(0.5)

        assert frame.position == pytest.approx((1.0, 0.0, 0.0))
        assert frame.tangent == pytest.approx((1.0, 0.0, 0.0))

    def test_start_forward_difference(self, line):
        frame = line.frame_on_curve(0.0)
        assert frame.position == pytest.approx((0.0, 0.0, 0.0))
        assert frame.tangent == pytest.approx((1.0, 0.0, 0.0))

    def test_end_backward_difference(self, line):
        """Am Domänenende zeigt die Tangente weiterhin vorwärts"""
        frame = line.frame_on_curve(1.0)
        assert frame.position == pytest.approx((2.0, 0.0, 0.0))
        assert frame.tangent == pytest.approx((1.0, 0.0, 0.0))

    def test_never_evaluates_past_upper(self):
        seen = []

        def evaluate(u):
            seen.append(u)
            return (u, 0.0, 0.0)

        estimate_frame(evaluate, 0.99995, upper=1.0)
        assert max(seen) <= 1.0

    def test_unit_tangent(self, quadratic_points):
        curve = NURBSCurve(control_points=quadratic_points, curve_type=CurveType.BEZIER)
        frame = curve.frame_on_curve(0.3)
        length = sum(c * c for c in frame.tangent) ** 0.5
        assert length == pytest.approx(1.0)

    def test_bspline_tangent_direction(self, cubic_points):
        """x steigt monoton, also überall positive x-Komponente"""
        curve = NURBSCurve(control_points=cubic_points, curve_type=CurveType.BSPLINE, degree=3)
        start, end = curve.domain
        for u in (start, 0.25, 0.5, 0.75, end):
            assert curve.frame_on_curve(u).tangent[0] > 0.0

    def test_bspline_frame_before_domain_start(self, cubic_points, log_messages):
        """u = 0 liegt vor knots[degree] und wird in die Domäne geklemmt"""
        curve = NURBSCurve(control_points=cubic_points[:5], curve_type=CurveType.BSPLINE, degree=3)
        start, _ = curve.domain
        frame = curve.frame_on_curve(0.0)

        assert frame.position == curve.point_on_curve(start)
        assert frame.tangent[0] > 0.0
        assert sum(c * c for c in frame.tangent) == pytest.approx(1.0)
        assert not any("degeneriert" in m for m in log_messages)

    def test_degenerate_tangent(self, log_messages):
        curve = NURBSCurve(control_points=[(1.0, 1.0, 1.0)] * 3, curve_type=CurveType.BEZIER)
        frame = curve.frame_on_curve(0.5)

        assert frame.tangent == (0.0, 0.0, 0.0)
        assert any("degeneriert" in m for m in log_messages)


class TestCurveFrame:

    def test_plane(self):
        frame = CurveFrame(position=(1.0, 2.0, 3.0), tangent=(0.0, 0.0, 1.0))

        assert frame.normal == (0.0, 0.0, 1.0)
        assert frame.distance == pytest.approx(-3.0)
        assert frame.plane[0] == frame.normal
        assert frame.plane[1] == frame.distance

    def test_position_on_plane(self, line):
        frame = line.frame_on_curve(0.25)
        n, d = frame.plane
        assert sum(a * b for a, b in zip(n, frame.position)) + d == pytest.approx(0.0)
