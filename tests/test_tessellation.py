"""
test_tessellation.py
Tests preview render primitives: point counts, scaling, closure flags, bulge splicing
and the bounding box used to frame the preview.
"""
import math

import pytest

from cutpath.config import Settings
from cutpath.utils.entities import (
    Arc, Circle, Ellipse, Line, Point, Polyline, PolylineVertex, Spline, Unsupported,
)
from cutpath.utils.tessellation import (
    RenderPrimitive, primitive_bounds, tessellate, tessellate_entity,
)


def approx_point(point, x, y):
    return point.x == pytest.approx(x, abs=1e-9) and point.y == pytest.approx(y, abs=1e-9)


def test_line_is_two_scaled_points():
    primitive = tessellate_entity(Line(Point(10, 20), Point(30, 40)))
    assert primitive.kind == "line"
    assert primitive.points == (Point(1.0, 2.0), Point(3.0, 4.0))
    assert primitive.closed is False


def test_circle_has_65_points_and_is_closed():
    primitive = tessellate_entity(Circle(Point(10, 0), 10))
    assert len(primitive.points) == 65
    assert primitive.closed is True
    assert approx_point(primitive.points[0], 2.0, 0.0)
    assert approx_point(primitive.points[-1], 2.0, 0.0)
    assert approx_point(primitive.points[16], 1.0, 1.0)


def test_arc_has_33_points():
    primitive = tessellate_entity(Arc(Point(0, 0), 10, 0, 90))
    assert len(primitive.points) == 33
    assert primitive.closed is False
    assert approx_point(primitive.points[0], 1.0, 0.0)
    assert approx_point(primitive.points[-1], 0.0, 1.0)


def test_arc_crossing_zero_wraps_forward():
    primitive = tessellate_entity(Arc(Point(0, 0), 10, 270, 90))
    assert approx_point(primitive.points[0], 0.0, -1.0)
    # sweeps counter-clockwise through 0 degrees, not back through 180
    assert approx_point(primitive.points[16], 1.0, 0.0)
    assert approx_point(primitive.points[-1], 0.0, 1.0)


def test_polyline_splices_bulge_arc_between_vertices():
    polyline = Polyline((
        PolylineVertex(Point(0, 0), 1.0),
        PolylineVertex(Point(2, 0), 0.0),
        PolylineVertex(Point(2, 1), 0.0),
    ))
    primitive = tessellate_entity(polyline)
    # vertex, 64 arc points after the first, then the two stored vertices
    assert len(primitive.points) == 1 + 64 + 2
    assert primitive.points[0] == Point(0.0, 0.0)
    assert approx_point(primitive.points[64], 0.2, 0.0)
    assert approx_point(primitive.points[-1], 0.2, 0.1)
    assert min(p.y for p in primitive.points) == pytest.approx(-0.1, abs=1e-4)


def test_closed_polyline_last_bulge_wraps_to_first_vertex():
    polyline = Polyline((
        PolylineVertex(Point(0, 0), 0.0),
        PolylineVertex(Point(2, 0), 1.0),
    ), closed=True)
    primitive = tessellate_entity(polyline)
    assert primitive.closed is True
    assert len(primitive.points) == 2 + 64
    assert approx_point(primitive.points[-1], 0.0, 0.0)


def test_straight_polyline_is_just_its_vertices():
    polyline = Polyline((PolylineVertex(Point(0, 0)), PolylineVertex(Point(10, 0)), PolylineVertex(Point(10, 10))))
    primitive = tessellate_entity(polyline)
    assert primitive.points == (Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0))
    assert primitive.closed is False


def test_spline_has_51_points_through_its_ends():
    primitive = tessellate_entity(Spline((Point(0, 0), Point(10, 20), Point(30, 30), Point(40, 0))))
    assert len(primitive.points) == 51
    assert approx_point(primitive.points[0], 0.0, 0.0)
    assert approx_point(primitive.points[-1], 4.0, 0.0)


def test_full_ellipse_is_closed():
    primitive = tessellate_entity(Ellipse(Point(0, 0), Point(20, 0), 0.5, 0, 360))
    assert len(primitive.points) == 65
    assert primitive.closed is True
    assert approx_point(primitive.points[0], 2.0, 0.0)
    assert approx_point(primitive.points[16], 0.0, 1.0)


def test_partial_ellipse_is_open():
    primitive = tessellate_entity(Ellipse(Point(0, 0), Point(20, 0), 0.5, 0, 180))
    assert primitive.closed is False
    assert approx_point(primitive.points[-1], -2.0, 0.0)


def test_unsupported_entities_are_skipped():
    entities = [Line(Point(0, 0), Point(1, 0)), Unsupported("TEXT", "unsupported entity type"), Circle(Point(0, 0), 1)]
    primitives = tessellate(entities)
    assert [p.kind for p in primitives] == ["line", "circle"]
    assert tessellate_entity(Unsupported("HATCH", "unsupported entity type")) is None


def test_display_scale_is_configurable():
    primitive = tessellate_entity(Line(Point(1, 2), Point(3, 4)), Settings(display_scale=2.0))
    assert primitive.points == (Point(2.0, 4.0), Point(6.0, 8.0))


def test_segment_counts_are_configurable():
    settings = Settings(circle_segments=8, arc_segments=4, spline_samples=10)
    assert len(tessellate_entity(Circle(Point(0, 0), 1), settings).points) == 9
    assert len(tessellate_entity(Arc(Point(0, 0), 1, 0, 90), settings).points) == 5
    assert len(tessellate_entity(Spline((Point(0, 0), Point(1, 1))), settings).points) == 11


def test_adaptive_mode_adds_segments_for_large_circles():
    settings = Settings(adaptive_tessellation=True)
    small = tessellate_entity(Circle(Point(0, 0), 1), settings)
    large = tessellate_entity(Circle(Point(0, 0), 200), settings)
    assert len(small.points) == 65
    # rendered circumference 2 * pi * 20 at 8 segments per unit
    assert len(large.points) == math.ceil(2 * math.pi * 20 * 8) + 1
    huge = tessellate_entity(Circle(Point(0, 0), 1e6), settings)
    assert len(huge.points) == 1025


def test_to_dict_shape():
    primitive = RenderPrimitive("line", (Point(0, 0), Point(1, 2)))
    assert primitive.to_dict() == {"type": "line", "points": [[0, 0], [1, 2]], "closed": False}


def test_bounds_cover_all_primitives():
    primitives = tessellate([Line(Point(-10, 0), Point(10, 0)), Circle(Point(0, 0), 20)])
    min_x, min_y, max_x, max_y = primitive_bounds(primitives)
    assert (min_x, min_y) == (pytest.approx(-2.0), pytest.approx(-2.0))
    assert (max_x, max_y) == (pytest.approx(2.0), pytest.approx(2.0))


def test_bounds_of_nothing():
    assert primitive_bounds([]) is None
