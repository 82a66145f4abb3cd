# api/main.py
"""
Flask entrypoint for the Kotlin compile relay.
"""

import logging
import sys

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from api.config import ConfigError, load_settings
from api.controller import CompileRelay, INTERNAL_ERROR_MESSAGE

logger = logging.getLogger(__name__)

SERVICE_NAME = "Kotlin Compiler Server is running!"
SERVICE_VERSION = "1.0.0"
MAX_BODY_BYTES = 1024 * 1024  # 1 MB


def create_app(settings=None, relay=None) -> Flask:
    """
    Build the application. Either a relay or settings to build one from must
    be supplied.
    """
    if relay is None:
        if settings is None:
            raise ValueError("create_app() needs settings or a relay")
        relay = CompileRelay.from_settings(settings)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_BODY_BYTES
    app.extensions["compile_relay"] = relay
    CORS(app)

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({"message": SERVICE_NAME, "version": SERVICE_VERSION, "endpoint": "/compile"})

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"ok": True})

    @app.route("/compile", methods=["POST"])
    def compile_code():
        caller_id = request.remote_addr or "unknown"

        # invalid JSON decodes to None and fails validation as missing code
        data = request.get_json(force=True, silent=True)
        body, status = relay.handle_payload(data, caller_id)
        return jsonify(body), status

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"success": False, "error": e.name}), e.code

    @app.errorhandler(Exception)
    def unhandled_error(e):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": INTERNAL_ERROR_MESSAGE}), 500

    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    try:
        settings = load_settings()
    except ConfigError as e:
        logger.critical("Invalid configuration: %s", e)
        sys.exit(1)

    app = create_app(settings)
    logger.info("Server starting on port %s (wrap style: %s)", settings.port, settings.wrap_style.value)
    # werkzeug logs a bind failure and exits with status 1 on its own
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    # Run with: python -m api.main  (run from the project root)
    main()
