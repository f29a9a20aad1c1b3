# entities.py
# Typed entity records and the classifier that validates raw parser output into them.
# Anything that fails validation becomes an Unsupported entity and is ignored by the
# measurement, pierce and tessellation code.

import logging
import math
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Tuple, Union

from cutpath.errors import InvalidEntityError

POLYLINE_TAGS = ("LWPOLYLINE", "POLYLINE")


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    z: float = 0.0

    def as_tuple(self):
        return (self.x, self.y, self.z)

    def scaled(self, factor):
        return Point(self.x * factor, self.y * factor, self.z * factor)


@dataclass(frozen=True)
class PolylineVertex:
    point: Point
    bulge: float = 0.0


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point


@dataclass(frozen=True)
class Arc:
    center: Point
    radius: float
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float


@dataclass(frozen=True)
class Polyline:
    vertices: Tuple[PolylineVertex, ...]
    closed: bool = False

    @property
    def points(self):
        return tuple(v.point for v in self.vertices)


@dataclass(frozen=True)
class Spline:
    control_points: Tuple[Point, ...]


@dataclass(frozen=True)
class Ellipse:
    center: Point
    major_axis_end_point: Point
    ratio: float
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class Unsupported:
    """A record that matched no variant. Contributes nothing anywhere."""

    tag: str
    reason: str


Entity = Union[Line, Arc, Circle, Polyline, Spline, Ellipse, Unsupported]


def record_tag(record):
    if not isinstance(record, Mapping):
        return ""
    return str(record.get("type", "")).strip().upper()


def _field(record, *names):
    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    return None


def _finite(value, name):
    if isinstance(value, bool):
        raise InvalidEntityError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidEntityError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidEntityError(f"{name} is not finite: {value!r}")
    return number


def _number(record, name, *aliases):
    value = _field(record, name, *aliases)
    if value is None:
        raise InvalidEntityError(f"missing {name}")
    return _finite(value, name)


def to_point(value, name="point"):
    """Coerce a mapping with x/y[/z] or a 2/3-sequence into a finite Point."""
    if isinstance(value, Point):
        coords = value.as_tuple()
    elif isinstance(value, Mapping):
        if "x" not in value or "y" not in value:
            raise InvalidEntityError(f"{name} needs x and y")
        coords = (value["x"], value["y"], value.get("z", 0.0) or 0.0)
    elif isinstance(value, Sequence) and not isinstance(value, str) and len(value) in (2, 3):
        coords = tuple(value) + ((0.0,) if len(value) == 2 else ())
    else:
        raise InvalidEntityError(f"{name} is not a point: {value!r}")
    return Point(*(_finite(c, name) for c in coords))


def _point(record, name, *aliases):
    value = _field(record, name, *aliases)
    if value is None:
        raise InvalidEntityError(f"missing {name}")
    return to_point(value, name)


def _positive(value, name):
    if value <= 0:
        raise InvalidEntityError(f"{name} must be positive, got {value}")
    return value


def build_line(record):
    vertices = _field(record, "vertices")
    if _field(record, "start") is None and isinstance(vertices, Sequence) and len(vertices) >= 2:
        return Line(to_point(vertices[0], "start"), to_point(vertices[1], "end"))
    return Line(_point(record, "start"), _point(record, "end"))


def build_arc(record):
    return Arc(
        center=_point(record, "center"),
        radius=_positive(_number(record, "radius"), "radius"),
        start_angle=_number(record, "start_angle", "startAngle"),
        end_angle=_number(record, "end_angle", "endAngle"),
    )


def build_circle(record):
    return Circle(_point(record, "center"), _positive(_number(record, "radius"), "radius"))


def build_polyline(record):
    raw_vertices = _field(record, "vertices")
    if not isinstance(raw_vertices, Sequence) or isinstance(raw_vertices, str):
        raise InvalidEntityError("missing vertices")
    vertices = []
    for i, raw in enumerate(raw_vertices):
        name = f"vertex {i}"
        if isinstance(raw, Mapping) and "point" in raw:
            point = to_point(raw["point"], name)
        else:
            point = to_point(raw, name)
        bulge = raw.get("bulge", 0.0) if isinstance(raw, Mapping) else 0.0
        vertices.append(PolylineVertex(point, _finite(bulge or 0.0, f"{name} bulge")))
    if len(vertices) < 2:
        raise InvalidEntityError(f"polyline needs at least 2 vertices, got {len(vertices)}")
    closed = bool(_field(record, "closed", "shape", "is_closed") or False)
    return Polyline(tuple(vertices), closed)


def build_spline(record):
    raw_points = _field(record, "control_points", "controlPoints")
    if not isinstance(raw_points, Sequence) or isinstance(raw_points, str):
        raise InvalidEntityError("missing control_points")
    points = tuple(to_point(p, f"control point {i}") for i, p in enumerate(raw_points))
    if len(points) < 2:
        raise InvalidEntityError(f"spline needs at least 2 control points, got {len(points)}")
    return Spline(points)


def build_ellipse(record):
    major = _point(record, "major_axis_end_point", "majorAxisEndPoint", "major_axis")
    if math.hypot(major.x, major.y) == 0:
        raise InvalidEntityError("major axis has zero length")
    ratio = _number(record, "ratio", "axis_ratio")
    if not 0 < ratio <= 1:
        raise InvalidEntityError(f"ratio must be in (0, 1], got {ratio}")
    return Ellipse(
        center=_point(record, "center"),
        major_axis_end_point=major,
        ratio=ratio,
        start_angle=_number(record, "start_angle", "startAngle"),
        end_angle=_number(record, "end_angle", "endAngle"),
    )


BUILDERS = {
    "LINE": build_line,
    "ARC": build_arc,
    "CIRCLE": build_circle,
    "LWPOLYLINE": build_polyline,
    "POLYLINE": build_polyline,
    "SPLINE": build_spline,
    "ELLIPSE": build_ellipse,
}


def _satisfies(record, tags):
    tag = record_tag(record)
    if tag not in tags:
        return False
    try:
        BUILDERS[tag](record)
    except InvalidEntityError:
        return False
    return True


def is_line_record(record):
    return _satisfies(record, ("LINE",))


def is_arc_record(record):
    return _satisfies(record, ("ARC",))


def is_circle_record(record):
    return _satisfies(record, ("CIRCLE",))


def is_polyline_record(record):
    return _satisfies(record, POLYLINE_TAGS)


def is_spline_record(record):
    return _satisfies(record, ("SPLINE",))


def is_ellipse_record(record):
    return _satisfies(record, ("ELLIPSE",))


def classify(record) -> Entity:
    """Validate one raw record into its typed variant, or Unsupported."""
    tag = record_tag(record)
    builder = BUILDERS.get(tag)
    if builder is None:
        reason = "record is not a mapping" if not isinstance(record, Mapping) else "unsupported entity type"
        logging.info(f"Skipping entity {tag or '<untyped>'}: {reason}")
        return Unsupported(tag, reason)
    try:
        return builder(record)
    except InvalidEntityError as e:
        logging.warning(f"Skipping invalid {tag} entity: {e}")
        return Unsupported(tag, str(e))


def classify_all(records) -> Tuple[Entity, ...]:
    """Classify a whole load into one immutable entity sequence."""
    return tuple(classify(record) for record in records)


def is_supported(entity: Entity) -> bool:
    return not isinstance(entity, Unsupported)


def count_by_type(entities) -> dict:
    """Entity counts keyed by variant name, plus OTHER for unsupported records."""
    counts = Counter()
    for entity in entities:
        counts["OTHER" if isinstance(entity, Unsupported) else type(entity).__name__.upper()] += 1
    return dict(counts)

