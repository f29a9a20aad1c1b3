# analysis.py
# Runs measurement, pierce counting and tessellation over one immutable entity
# sequence per load and collects the results for callers (routes, batch script).

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from cutpath.config import Settings
from cutpath.utils.dxf_loader import load_records
from cutpath.utils.entities import classify_all, count_by_type, is_supported
from cutpath.utils.measurement import cutting_distance
from cutpath.utils.pierce import pierce_count
from cutpath.utils.tessellation import RenderPrimitive, primitive_bounds, tessellate


@dataclass(frozen=True)
class PartAnalysis:
    total_length: float
    pierce_count: int
    preview: Tuple[RenderPrimitive, ...]
    entity_count: dict = field(default_factory=dict)
    skipped: int = 0
    bounds: Optional[Tuple[float, float, float, float]] = None

    def to_dict(self):
        return {
            "total_length": self.total_length,
            "pierce_count": self.pierce_count,
            "entity_count": dict(self.entity_count),
            "skipped": self.skipped,
            "preview": [primitive.to_dict() for primitive in self.preview],
            "bounds": list(self.bounds) if self.bounds else None,
        }


def analyze_entities(entities, settings=None):
    """Measure, count pierces and tessellate an already classified entity sequence."""
    settings = settings or Settings()
    entities = tuple(entities)
    total_length = cutting_distance(
        entities, bulge_aware=settings.bulge_aware_length, spline_resolution=settings.spline_resolution
    )
    pierces = pierce_count(entities, tolerance=settings.point_tolerance)
    preview = tuple(tessellate(entities, settings))
    return PartAnalysis(
        total_length=total_length,
        pierce_count=pierces,
        preview=preview,
        entity_count=count_by_type(entities),
        skipped=sum(1 for e in entities if not is_supported(e)),
        bounds=primitive_bounds(preview),
    )


def analyze_records(records, settings=None):
    """Classify raw parser records and analyse them."""
    return analyze_entities(classify_all(records), settings)


def analyze_dxf(source, settings=None):
    """Load a DXF file or stream and analyse its modelspace. Raises DXFLoadError."""
    result = analyze_records(load_records(source), settings)
    name = os.path.basename(os.fspath(source)) if isinstance(source, (str, os.PathLike)) else "<stream>"
    logging.info(f"Summary for {name}:")
    logging.info(f"  Total Cut Length: {result.total_length:.2f}")
    logging.info(f"  Pierce Count: {result.pierce_count}")
    logging.info(f"  Entity Counts: {result.entity_count}")
    if result.skipped:
        logging.warning(f"  Skipped {result.skipped} unsupported or invalid entities in {name}")
    return result
