# tessellation.py
# Converts entities into render primitives (point sequences plus an open/closed flag)
# for the preview. Every coordinate is multiplied by the display scale factor; nothing
# here feeds back into measurement.

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from shapely.geometry import MultiLineString

from cutpath.config import Settings
from cutpath.utils.entities import Arc, Circle, Ellipse, Line, Point, Polyline, Spline, Unsupported
from cutpath.utils.geometry import catmull_rom_points, expand_bulge, point_on_arc, point_on_ellipse

ELLIPSE_SEGMENTS = 64
ADAPTIVE_SEGMENTS_PER_UNIT = 8
MAX_ADAPTIVE_SEGMENTS = 1024


@dataclass(frozen=True)
class RenderPrimitive:
    kind: str
    points: Tuple[Point, ...]
    closed: bool = False

    def to_dict(self):
        return {
            "type": self.kind,
            "points": [[p.x, p.y] for p in self.points],
            "closed": self.closed,
        }


def _segments(base, sweep_degrees, radius, settings):
    """Fixed segment count, or one scaled with the rendered arc length in adaptive mode."""
    if not settings.adaptive_tessellation:
        return base
    rendered = math.radians(abs(sweep_degrees)) * radius * settings.display_scale
    return min(max(base, math.ceil(rendered * ADAPTIVE_SEGMENTS_PER_UNIT)), MAX_ADAPTIVE_SEGMENTS)


def _sweep(start_angle, end_angle):
    end_angle = end_angle + 360 if end_angle < start_angle else end_angle
    return end_angle - start_angle


def tessellate_line(line, settings):
    scale = settings.display_scale
    return RenderPrimitive("line", (line.start.scaled(scale), line.end.scaled(scale)))


def tessellate_circle(circle, settings):
    segments = _segments(settings.circle_segments, 360, circle.radius, settings)
    points = tuple(
        point_on_arc(circle.center, circle.radius, 360 * i / segments).scaled(settings.display_scale)
        for i in range(segments + 1)
    )
    return RenderPrimitive("circle", points, closed=True)


def tessellate_arc(arc, settings):
    sweep = _sweep(arc.start_angle, arc.end_angle)
    segments = _segments(settings.arc_segments, sweep, arc.radius, settings)
    points = tuple(
        point_on_arc(arc.center, arc.radius, arc.start_angle + sweep * i / segments).scaled(settings.display_scale)
        for i in range(segments + 1)
    )
    return RenderPrimitive("arc", points)


def tessellate_polyline(polyline, settings):
    scale = settings.display_scale
    vertices = polyline.vertices
    points = []
    for i, vertex in enumerate(vertices):
        points.append(vertex.point.scaled(scale))
        if vertex.bulge:
            following = vertices[(i + 1) % len(vertices)]
            points.extend(expand_bulge(vertex.point, following.point, vertex.bulge, scale)[1:])
    return RenderPrimitive("polyline", tuple(points), closed=polyline.closed)


def tessellate_spline(spline, settings):
    points = catmull_rom_points(spline.control_points, settings.spline_samples)
    return RenderPrimitive("spline", tuple(p.scaled(settings.display_scale) for p in points))


def tessellate_ellipse(ellipse, settings):
    sweep = _sweep(ellipse.start_angle, ellipse.end_angle)
    points = tuple(
        point_on_ellipse(
            ellipse.center, ellipse.major_axis_end_point, ellipse.ratio,
            ellipse.start_angle + sweep * i / ELLIPSE_SEGMENTS,
        ).scaled(settings.display_scale)
        for i in range(ELLIPSE_SEGMENTS + 1)
    )
    return RenderPrimitive("ellipse", points, closed=math.isclose(sweep, 360))


TESSELLATORS = {
    Line: tessellate_line,
    Circle: tessellate_circle,
    Arc: tessellate_arc,
    Polyline: tessellate_polyline,
    Spline: tessellate_spline,
    Ellipse: tessellate_ellipse,
}


def tessellate_entity(entity, settings=None):
    """Render primitive for one entity, or None when it is not drawable."""
    settings = settings or Settings()
    tessellator = TESSELLATORS.get(type(entity))
    if tessellator is None:
        reason = entity.reason if isinstance(entity, Unsupported) else "unknown entity"
        logging.info(f"No preview for {getattr(entity, 'tag', type(entity).__name__)}: {reason}")
        return None
    return tessellator(entity, settings)


def tessellate(entities, settings=None):
    """Ordered render primitives for every drawable entity."""
    settings = settings or Settings()
    primitives = []
    for entity in entities:
        primitive = tessellate_entity(entity, settings)
        if primitive is not None:
            primitives.append(primitive)
    return primitives


def primitive_bounds(primitives):
    """(min_x, min_y, max_x, max_y) of the rendered geometry, or None when empty."""
    lines = [[(p.x, p.y) for p in primitive.points] for primitive in primitives if len(primitive.points) > 1]
    if not lines:
        return None
    return tuple(MultiLineString(lines).bounds)
