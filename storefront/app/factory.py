from __future__ import annotations

import logging
from flask import Flask, g, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from storefront.app.config import Config
from storefront.app.extensions import db, migrate, cors
from storefront.app.common.converters import IdConverter
from storefront.app.common.errors import INTERNAL_ERROR, ApiError, code_for_status
from storefront.app.common.request_context import REQUEST_ID_HEADER, current_request_id, init_request_id
from storefront.app.api.register import register_api_blueprints
from storefront.app.cli import cli_bp
from storefront.app.ui import ui_bp


def _wants_json() -> bool:
    return request.path.startswith("/api")


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    app.url_map.converters["id"] = IdConverter

    logging.basicConfig(
        level=getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}},
        supports_credentials=True,
    )

    # Request id
    @app.before_request
    def _before_request():
        init_request_id()

    @app.after_request
    def _after_request(response):
        rid = current_request_id()
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        app.logger.debug("%s %s -> %s [%s]", request.method, request.path, response.status_code, rid)
        return response

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    register_api_blueprints(app)

    # CLI (flask seed, flask init-db)
    app.register_blueprint(cli_bp)

    # Pages
    app.register_blueprint(ui_bp)

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(current_request_id())), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        if not _wants_json():
            if err.code == 404:
                return render_template("404.html"), 404
            return err

        # Normalize Werkzeug errors into our JSON shape
        payload = ApiError(err.code or 500, code_for_status(err.code or 500), err.description or err.name, {"name": err.name})
        return jsonify(payload.to_dict(current_request_id())), payload.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception [%s]", g.get("request_id"))
        payload = ApiError(500, INTERNAL_ERROR, "Internal server error")
        return jsonify(payload.to_dict(current_request_id())), 500

    return app
