from flask import Blueprint, request, jsonify, current_app
from flask_cors import cross_origin
from werkzeug.utils import secure_filename
import os
import logging

from cutpath.errors import DXFLoadError
from cutpath.utils.analysis import analyze_dxf, analyze_records

main_bp = Blueprint('main', __name__)


def current_settings():
    return current_app.config['CUTPATH_SETTINGS']


@main_bp.route('/parse_dxf', methods=['POST'])
@cross_origin()
def parse_dxf():
    if 'file' not in request.files:
        return jsonify({"error": "No file part in the request"}), 400
    files = request.files.getlist('file')
    logging.info(f"parse_dxf received files: {[file.filename for file in files]}")
    if not files or all(f.filename == '' for f in files):
        return jsonify({"error": "No file selected for uploading"}), 400

    results = []
    partial_warnings = []
    for file in files:
        if file.filename == '':
            continue
        if not file.filename.lower().endswith('.dxf'):
            return jsonify({"error": f'Invalid file type: {file.filename}. Please upload a .dxf file'}), 400
        filename = secure_filename(file.filename)
        save_path = os.path.join(current_app.config['UPLOAD_FOLDER'], filename)
        file.save(save_path)
        logging.info(f"Uploaded file saved to {save_path}")
        try:
            result = analyze_dxf(save_path, current_settings())
        except DXFLoadError as e:
            logging.error(f"Error parsing DXF {filename}: {e}")
            return jsonify({"error": f"Failed to parse {filename}: {e.reason}"}), 422
        if result.skipped:
            partial_warnings.append(f"Partial parse for {filename}: {result.skipped} unsupported entities skipped")
        results.append({"part_number": filename, **result.to_dict()})

    response = {"status": "success", "results": results}
    if partial_warnings:
        response["partial_warnings"] = partial_warnings
    return jsonify(response)


@main_bp.route('/measure', methods=['POST'])
@cross_origin()
def measure():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('entities'), list):
        return jsonify({"error": "Request body must be JSON with an 'entities' list"}), 400
    result = analyze_records(data['entities'], current_settings())
    logging.info(f"/measure: {len(data['entities'])} records, total_length={result.total_length:.2f}, pierce_count={result.pierce_count}")
    return jsonify({"status": "success", "part_number": data.get('part_number'), **result.to_dict()})
