# geometry.py
# Pure reconstruction helpers: bulge arcs, points on arcs/ellipses, ellipse perimeter
# and Catmull-Rom interpolation. Angles passed in are degrees unless noted.

import logging
import math

from cutpath.utils.entities import Point

MIN_BULGE_SEGMENTS = 64
MAX_BULGE_SEGMENTS = 65536
BULGE_SEGMENTS_PER_UNIT = 20


def distance(a, b):
    """Planar distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def bulge_arc(start, end, bulge):
    """Arc parameters (center, radius, start angle, end angle, theta) for a bulge segment.

    Angles are radians. Returns None for a straight or degenerate segment.
    """
    if bulge == 0:
        return None
    chord_x = end.x - start.x
    chord_y = end.y - start.y
    chord = math.hypot(chord_x, chord_y)
    if chord == 0:
        logging.warning(f"Zero-length bulge chord at ({start.x}, {start.y}); using a straight segment")
        return None
    theta = 4 * math.atan(abs(bulge))
    try:
        radius = chord / (2 * math.sin(theta / 2))
    except ZeroDivisionError:
        radius = math.inf
    if not math.isfinite(radius) or radius <= 0:
        logging.warning(f"Bulge {bulge} gives a non-finite radius; using a straight segment")
        return None
    direction = 1 if bulge > 0 else -1
    offset = radius * math.cos(theta / 2) * direction
    center = Point(
        (start.x + end.x) / 2 - chord_y / chord * offset,
        (start.y + end.y) / 2 + chord_x / chord * offset,
        start.z,
    )
    start_angle = math.atan2(start.y - center.y, start.x - center.x)
    end_angle = start_angle + theta * direction
    return center, radius, start_angle, end_angle, theta


def expand_bulge(start, end, bulge, scale=1.0):
    """Point sequence for one polyline segment, scaled by ``scale``.

    A zero bulge, zero-length chord or non-finite radius yields the straight segment
    ``[start, end]``. Otherwise the arc is sampled with
    ``max(ceil(theta * radius * 20), 64)`` equal angular steps, at most 65536, first
    point on ``start``.
    """
    arc = bulge_arc(start, end, bulge)
    if arc is None:
        return [start.scaled(scale), end.scaled(scale)]
    center, radius, start_angle, end_angle, theta = arc
    segments = max(math.ceil(abs(theta) * radius * BULGE_SEGMENTS_PER_UNIT), MIN_BULGE_SEGMENTS)
    if segments > MAX_BULGE_SEGMENTS:
        logging.warning(f"Bulge {bulge} needs {segments} segments; capping at {MAX_BULGE_SEGMENTS}")
        segments = MAX_BULGE_SEGMENTS
    points = []
    for i in range(segments + 1):
        angle = start_angle + (end_angle - start_angle) * i / segments
        points.append(Point(
            (center.x + math.cos(angle) * radius) * scale,
            (center.y + math.sin(angle) * radius) * scale,
            start.z * scale,
        ))
    return points


def bulge_arc_length(start, end, bulge):
    """True length of a bulge segment; the chord when the segment is straight."""
    arc = bulge_arc(start, end, bulge)
    if arc is None:
        return distance(start, end)
    _, radius, _, _, theta = arc
    return radius * theta


def point_on_arc(center, radius, angle):
    rad = math.radians(angle)
    return Point(center.x + radius * math.cos(rad), center.y + radius * math.sin(rad), center.z)


def ellipse_axes(major_axis_end_point, ratio):
    """(major length, minor length) of an ellipse."""
    major = math.hypot(major_axis_end_point.x, major_axis_end_point.y)
    return major, major * ratio


def point_on_ellipse(center, major_axis_end_point, ratio, angle):
    """Point at parametric ``angle`` on an ellipse; the minor axis is the major axis turned +90 degrees."""
    rad = math.radians(angle)
    cos_t = math.cos(rad)
    sin_t = math.sin(rad) * ratio
    mx, my = major_axis_end_point.x, major_axis_end_point.y
    return Point(
        center.x + mx * cos_t - my * sin_t,
        center.y + my * cos_t + mx * sin_t,
        center.z,
    )


def ramanujan_perimeter(a, b):
    """Ramanujan's second approximation of an ellipse circumference."""
    return math.pi * (3 * (a + b) - math.sqrt((3 * a + b) * (a + 3 * b)))


def _catmull_rom_coefficients(x0, x1, x2, x3, dt0, dt1, dt2):
    t1 = (x1 - x0) / dt0 - (x2 - x0) / (dt0 + dt1) + (x2 - x1) / dt1
    t2 = (x2 - x1) / dt1 - (x3 - x1) / (dt1 + dt2) + (x3 - x2) / dt2
    t1 *= dt1
    t2 *= dt1
    return x1, t1, -3 * x1 + 3 * x2 - 2 * t1 - t2, 2 * x1 - 2 * x2 + t1 + t2


def _reflect(a, b):
    return Point(2 * a.x - b.x, 2 * a.y - b.y, 2 * a.z - b.z)


def _knot_interval(a, b):
    # centripetal parameterisation: |b - a| ** 0.5
    return ((b.x - a.x) ** 2 + (b.y - a.y) ** 2 + (b.z - a.z) ** 2) ** 0.25


def catmull_rom_point(points, t):
    """Point at parameter ``t`` in [0, 1] on an open centripetal Catmull-Rom curve."""
    count = len(points)
    p = (count - 1) * t
    index = int(math.floor(p))
    weight = p - index
    if index >= count - 1:
        index, weight = count - 2, 1.0
    p1 = points[index]
    p2 = points[index + 1]
    p0 = points[index - 1] if index > 0 else _reflect(points[0], points[1])
    p3 = points[index + 2] if index + 2 < count else _reflect(points[-1], points[-2])

    dt0 = _knot_interval(p0, p1)
    dt1 = _knot_interval(p1, p2)
    dt2 = _knot_interval(p2, p3)
    if dt1 < 1e-4:
        dt1 = 1.0
    if dt0 < 1e-4:
        dt0 = dt1
    if dt2 < 1e-4:
        dt2 = dt1

    coords = []
    for axis in ("x", "y", "z"):
        c0, c1, c2, c3 = _catmull_rom_coefficients(
            getattr(p0, axis), getattr(p1, axis), getattr(p2, axis), getattr(p3, axis), dt0, dt1, dt2
        )
        coords.append(c0 + c1 * weight + c2 * weight ** 2 + c3 * weight ** 3)
    return Point(*coords)


def catmull_rom_points(points, divisions):
    """``divisions + 1`` points evenly spaced in parameter along the curve through ``points``."""
    return [catmull_rom_point(points, i / divisions) for i in range(divisions + 1)]
