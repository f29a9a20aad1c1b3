# batch.py
# Measures every DXF file in a directory and writes a CSV summary, one row per file.
# Files that fail to load are logged and reported with success=False.

import csv
import logging
import os

from cutpath.errors import DXFLoadError
from cutpath.utils.analysis import analyze_dxf

ENTITY_TYPES = ["LINE", "ARC", "CIRCLE", "POLYLINE", "SPLINE", "ELLIPSE", "OTHER"]
FIELDNAMES = ["filename", "success", "total_length", "pierce_count", "skipped"] + ENTITY_TYPES


def inventory_directory(directory, output_csv, settings=None):
    """Analyse all ``.dxf`` files under ``directory``; returns the rows written to ``output_csv``."""
    files = sorted(f for f in os.listdir(directory) if f.lower().endswith('.dxf'))
    if not files:
        logging.warning(f"No DXF files found in {directory}")
    rows = []
    for fname in files:
        path = os.path.join(directory, fname)
        row = {"filename": fname, "success": True}
        try:
            result = analyze_dxf(path, settings)
        except DXFLoadError as e:
            logging.error(f"Exception parsing {fname}: {e}")
            row.update({"success": False, "total_length": 0, "pierce_count": 0, "skipped": 0})
            row.update({etype: 0 for etype in ENTITY_TYPES})
        else:
            row.update({
                "total_length": round(result.total_length, 6),
                "pierce_count": result.pierce_count,
                "skipped": result.skipped,
            })
            row.update({etype: result.entity_count.get(etype, 0) for etype in ENTITY_TYPES})
        rows.append(row)

    with open(output_csv, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(rows)
    logging.info(f"CSV summary written to {output_csv}")
    failed = [row["filename"] for row in rows if not row["success"]]
    if failed:
        logging.warning("Files flagged for manual review (parse error):\n" + '\n'.join(failed))
    return rows
