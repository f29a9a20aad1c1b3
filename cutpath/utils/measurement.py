# measurement.py
# Total cutting distance (tool-path length) of an entity sequence, in native file units.
# Polyline length ignores bulge curvature unless bulge_aware is requested; the preview
# still draws the bulge arcs.

import logging
import math

from cutpath.config import SPLINE_LENGTH_RESOLUTION
from cutpath.utils.entities import Arc, Circle, Ellipse, Line, Polyline, Spline
from cutpath.utils.geometry import bulge_arc_length, distance, ellipse_axes, ramanujan_perimeter


def line_length(line):
    return distance(line.start, line.end)


def arc_length(arc):
    """Swept angle times radius. No wraparound correction beyond the absolute difference."""
    return math.radians(abs(arc.end_angle - arc.start_angle)) * arc.radius


def circle_length(circle):
    return 2 * math.pi * circle.radius


def polyline_length(polyline, bulge_aware=False):
    """Sum of segment lengths between consecutive stored vertices, plus the closing one when closed."""
    vertices = list(polyline.vertices)
    if polyline.closed:
        vertices.append(vertices[0])
    length = 0.0
    for current, following in zip(vertices, vertices[1:]):
        if bulge_aware:
            length += bulge_arc_length(current.point, following.point, current.bulge)
        else:
            length += distance(current.point, following.point)
    return length


def spline_length(spline, resolution=SPLINE_LENGTH_RESOLUTION):
    """First-order estimate: each control-point pair split into ``resolution`` straight pieces."""
    length = 0.0
    points = spline.control_points
    for cp1, cp2 in zip(points, points[1:]):
        dx = (cp2.x - cp1.x) / resolution
        dy = (cp2.y - cp1.y) / resolution
        for j in range(resolution):
            x1 = cp1.x + dx * j
            y1 = cp1.y + dy * j
            x2 = cp1.x + dx * (j + 1)
            y2 = cp1.y + dy * (j + 1)
            length += math.hypot(x2 - x1, y2 - y1)
    return length


def ellipse_length(ellipse):
    """Ramanujan circumference scaled by the swept fraction of a full turn."""
    major, minor = ellipse_axes(ellipse.major_axis_end_point, ellipse.ratio)
    circumference = ramanujan_perimeter(major, minor)
    return circumference * abs(ellipse.end_angle - ellipse.start_angle) / 360


def measure_entity(entity, bulge_aware=False, spline_resolution=SPLINE_LENGTH_RESOLUTION):
    """Cutting-distance contribution of one entity; 0 for unsupported ones."""
    if isinstance(entity, Line):
        length = line_length(entity)
    elif isinstance(entity, Arc):
        length = arc_length(entity)
    elif isinstance(entity, Circle):
        length = circle_length(entity)
    elif isinstance(entity, Polyline):
        length = polyline_length(entity, bulge_aware)
    elif isinstance(entity, Spline):
        length = spline_length(entity, spline_resolution)
    elif isinstance(entity, Ellipse):
        length = ellipse_length(entity)
    else:
        return 0.0
    if not math.isfinite(length) or length < 0:
        logging.warning(f"Discarding non-finite length {length} for {type(entity).__name__}")
        return 0.0
    return length


def entity_lengths(entities, bulge_aware=False, spline_resolution=SPLINE_LENGTH_RESOLUTION):
    """Yield (entity, contribution) for every entity in order."""
    for entity in entities:
        yield entity, measure_entity(entity, bulge_aware, spline_resolution)


def cutting_distance(entities, bulge_aware=False, spline_resolution=SPLINE_LENGTH_RESOLUTION):
    """Total tool-path length of ``entities``."""
    total_length = 0.0
    for entity, length in entity_lengths(entities, bulge_aware, spline_resolution):
        if length:
            logging.debug(f"{type(entity).__name__}: Length={length:.4f}")
        total_length += length
    return total_length
