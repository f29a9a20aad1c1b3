from flask import Blueprint, request, jsonify, current_app
from dataclasses import asdict
import os
import tempfile
import logging

from cutpath.errors import DXFLoadError
from cutpath.utils.dxf_loader import load_records
from cutpath.utils.entities import classify_all
from cutpath.utils.analysis import analyze_entities

debug_bp = Blueprint('debug', __name__, url_prefix='/debug')


@debug_bp.route('/parse', methods=['POST'])
def parse_dxf():
    if 'file' not in request.files:
        return jsonify({"error": "No file part"}), 400
    file = request.files['file']
    if not file.filename.lower().endswith('.dxf'):
        return jsonify({"error": "File must be a .dxf"}), 400

    with tempfile.NamedTemporaryFile(delete=False, suffix='.dxf') as temp_file:
        file.save(temp_file.name)
        temp_file_path = temp_file.name
    try:
        entities = classify_all(load_records(temp_file_path))
    except DXFLoadError as e:
        return jsonify({"error": f"Failed to parse {file.filename}: {e.reason}"}), 422
    finally:
        if os.path.exists(temp_file_path):
            os.unlink(temp_file_path)

    result = analyze_entities(entities, current_app.config['CUTPATH_SETTINGS'])
    logging.debug(f"[DEV] DXF parse result for {file.filename}: {result.entity_count}")
    return jsonify({
        "status": "success",
        "part_number": file.filename,
        "entities": [{"variant": type(e).__name__, **asdict(e)} for e in entities],
        **result.to_dict(),
    }), 200
