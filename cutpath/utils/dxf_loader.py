# dxf_loader.py
# Reads DXF files with ezdxf and turns modelspace entities into plain records
# ({"type": ..., fields...}) for the classifier. Blocks, inserts, text and hatches are
# passed through as bare tagged records and end up unsupported.

import io
import logging
import math
import os

import ezdxf
from ezdxf.lldxf.const import DXFError

from cutpath.errors import DXFLoadError


def _xyz(vec):
    return {"x": float(vec[0]), "y": float(vec[1]), "z": float(vec[2]) if len(vec) > 2 else 0.0}


def read_document(source):
    """Open a DXF document from a path, a text stream, bytes or a binary stream."""
    name = os.fspath(source) if isinstance(source, (str, os.PathLike)) else getattr(source, "name", "<stream>")
    try:
        if isinstance(source, (str, os.PathLike)):
            return ezdxf.readfile(source)
        if isinstance(source, bytes):
            source = io.BytesIO(source)
        if isinstance(source, io.TextIOBase):
            return ezdxf.read(source)
        return ezdxf.read(io.TextIOWrapper(source, encoding="utf-8", errors="replace"))
    except IOError as e:
        logging.error(f"Could not read DXF {name}: {e}")
        raise DXFLoadError(name, str(e)) from e
    except DXFError as e:
        logging.error(f"Invalid or corrupt DXF {name}: {e}")
        raise DXFLoadError(name, str(e)) from e


def _line(entity):
    return {"start": _xyz(entity.dxf.start), "end": _xyz(entity.dxf.end)}


def _arc(entity):
    return {
        "center": _xyz(entity.dxf.center),
        "radius": entity.dxf.radius,
        "start_angle": entity.dxf.start_angle,
        "end_angle": entity.dxf.end_angle,
    }


def _circle(entity):
    return {"center": _xyz(entity.dxf.center), "radius": entity.dxf.radius}


def _lwpolyline(entity):
    elevation = float(entity.dxf.get("elevation", 0.0) or 0.0)
    vertices = [
        {"x": x, "y": y, "z": elevation, "bulge": bulge}
        for x, y, bulge in entity.get_points("xyb")
    ]
    return {"vertices": vertices, "closed": bool(entity.closed)}


def _polyline(entity):
    if not (entity.is_2d_polyline or entity.is_3d_polyline):
        # polyface and polygon meshes
        return None
    vertices = []
    for v in entity.vertices:
        vertex = _xyz(v.dxf.location)
        vertex["bulge"] = v.dxf.get("bulge", 0.0) or 0.0
        vertices.append(vertex)
    return {"vertices": vertices, "closed": bool(entity.is_closed)}


def _spline(entity):
    points = list(entity.control_points)
    if not points and len(entity.fit_points):
        logging.info("SPLINE has no control points, using its fit points")
        points = list(entity.fit_points)
    return {"control_points": [_xyz(p) for p in points]}


def _ellipse(entity):
    return {
        "center": _xyz(entity.dxf.center),
        "major_axis_end_point": _xyz(entity.dxf.major_axis),
        "ratio": entity.dxf.ratio,
        "start_angle": math.degrees(entity.dxf.start_param),
        "end_angle": math.degrees(entity.dxf.end_param),
    }


CONVERTERS = {
    "LINE": _line,
    "ARC": _arc,
    "CIRCLE": _circle,
    "LWPOLYLINE": _lwpolyline,
    "POLYLINE": _polyline,
    "SPLINE": _spline,
    "ELLIPSE": _ellipse,
}


def entity_record(entity):
    """Plain record for one ezdxf entity; unknown types keep only their tag."""
    entity_type = entity.dxftype()
    converter = CONVERTERS.get(entity_type)
    if converter is None:
        return {"type": entity_type}
    try:
        fields = converter(entity)
    except (AttributeError, TypeError, ValueError, DXFError) as e:
        logging.warning(f"Could not read {entity_type} entity {entity.dxf.handle}: {e}")
        return {"type": entity_type}
    if fields is None:
        return {"type": f"{entity_type}_MESH"}
    return {"type": entity_type, **fields}


def document_records(doc):
    """Ordered records for every modelspace entity of an open document."""
    return [entity_record(entity) for entity in doc.modelspace()]


def load_records(source):
    """Read ``source`` and return its ordered entity records.

    Raises DXFLoadError when the file cannot be parsed at all.
    """
    doc = read_document(source)
    records = document_records(doc)
    logging.info(f"Loaded {len(records)} entities from DXF version {doc.dxfversion}")
    return records
