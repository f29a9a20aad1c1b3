# LOGGING MUST BE CONFIGURED BEFORE ANY OTHER IMPORTS OR LOGGING USAGE
import logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('error.log', encoding='utf-8')
    ]
)

import os
import traceback

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from cutpath.config import ENV_VARS, Settings

__version__ = "1.2.0"


def create_app(config=None):
    app = Flask(__name__)
    app.config['SECRET_KEY'] = os.environ.get("FLASK_SECRET_KEY", "cutpath-secret-key-here")
    CORS(app, supports_credentials=True)
    app.config['UPLOAD_FOLDER'] = os.environ.get("UPLOAD_FOLDER", os.path.join(app.instance_path, 'uploads'))
    app.config['MAX_CONTENT_LENGTH'] = int(os.environ.get("MAX_CONTENT_LENGTH", 32 * 1024 * 1024))
    for env_var in ENV_VARS.values():
        if env_var in os.environ:
            app.config[env_var] = os.environ[env_var]

    if config:
        app.config.update(config)

    # Validate measurement settings up front so a bad value fails at startup
    app.config['CUTPATH_SETTINGS'] = Settings.from_mapping(app.config)
    logging.info(f"Measurement settings: {app.config['CUTPATH_SETTINGS']}")

    # Error Handler
    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e
        tb = traceback.format_exc()
        logging.error(f"Exception: {e}\nTraceback:\n{tb}")
        return jsonify({"error": f"Internal error: {e}"}), 500

    # Register blueprints
    from .routes.main import main_bp
    app.register_blueprint(main_bp)
    # Register debug blueprint only in development
    debug_mode = os.environ.get('FLASK_DEBUG', '0') == '1' or app.config.get('DEBUG', False)
    if debug_mode:
        from .routes.debug import debug_bp
        app.register_blueprint(debug_bp)
        logging.info('Debug blueprint registered (development mode)')
    for rule in app.url_map.iter_rules():
        logging.debug(f"Registered route: {rule.rule} | methods={rule.methods} | endpoint={rule.endpoint}")

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
    logging.info(f"UPLOAD_FOLDER set to {app.config['UPLOAD_FOLDER']}")

    return app
