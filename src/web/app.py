"""
CAP codec Flask application
"""

from typing import Any, Dict, Optional

from flask import Flask
from flask_cors import CORS

DEFAULT_CONFIG = {
    # CAP alerts with embedded resources can be large, but not this large
    'MAX_CONTENT_LENGTH': 16 * 1024 * 1024,
}


def create_app(config: Optional[Dict[str, Any]] = None):
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    if config:
        app.config.update(config)
    CORS(app)

    # register blueprints
    from .routes import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    return app
