"""Shared builders for entity records used across the test modules."""


def rectangle(width=4.0, height=2.0, origin=(0.0, 0.0)):
    x, y = origin
    return [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]


def polyline_record(points, closed=False, bulges=None):
    bulges = bulges or [0.0] * len(points)
    return {
        "type": "LWPOLYLINE",
        "vertices": [{"x": x, "y": y, "bulge": b} for (x, y), b in zip(points, bulges)],
        "closed": closed,
    }


def line_record(start, end):
    return {"type": "LINE", "start": {"x": start[0], "y": start[1]}, "end": {"x": end[0], "y": end[1]}}


def circle_record(center=(0.0, 0.0), radius=1.0):
    return {"type": "CIRCLE", "center": {"x": center[0], "y": center[1]}, "radius": radius}


def arc_record(center=(0.0, 0.0), radius=1.0, start_angle=0.0, end_angle=90.0):
    return {
        "type": "ARC",
        "center": {"x": center[0], "y": center[1]},
        "radius": radius,
        "startAngle": start_angle,
        "endAngle": end_angle,
    }
