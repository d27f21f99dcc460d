import atexit
import signal
import sys
import time
import traceback
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from flasgger import Swagger
from loguru import logger
from pymongo.database import Database
from werkzeug.exceptions import HTTPException

from config import Config
from db import close_client, create_client, get_database
from logging_config import configure_logging
from repositories.job_repository import JobRepository
from routes.job_routes import bp as job_bp
from routes.meta_routes import API_VERSION, bp as meta_bp


def create_app(config: Optional[Config] = None, database: Optional[Database] = None) -> Flask:
    """Build the app around an open database; the caller owns the client lifecycle."""
    config = config or Config()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.config["APP_ENV"] = config.app_env
    app.config["STARTED_AT"] = time.monotonic()
    CORS(app, origins=config.cors_origins, supports_credentials=True)

    if database is None:
        client = create_client(config.mongodb_uri, config.mongo_timeout_ms)
        app.extensions["mongo_client"] = client
        database = get_database(client, config.db_name)

    repository = JobRepository(database)
    repository.create_indexes()
    app.extensions["job_repository"] = repository

    app.register_blueprint(meta_bp)
    app.register_blueprint(job_bp)
    register_error_handlers(app, config)

    Swagger(app, template={
        "info": {"title": "Freelance Marketplace API", "version": API_VERSION},
        "basePath": "/"
    })

    return app


def register_error_handlers(app: Flask, config: Config) -> None:
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"success": False, "message": "Route not found", "path": request.path}), 404

    @app.errorhandler(Exception)
    def unhandled(e):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        payload = {"success": False, "message": str(e) or "Internal server error", "error": str(e)}
        if config.is_development:
            payload["stack"] = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        return jsonify(payload), 500


def _shutdown(signum, frame):
    logger.info("Shutting down gracefully...")
    sys.exit(0)


def main() -> None:
    config = Config()
    client = create_client(config.mongodb_uri, config.mongo_timeout_ms)
    atexit.register(close_client, client)
    signal.signal(signal.SIGTERM, _shutdown)

    try:
        app = create_app(config, get_database(client, config.db_name))
    except Exception:
        logger.exception("Failed to start server")
        sys.exit(1)

    logger.info(f"Server is running on port {config.port}")
    logger.info(f"Environment: {config.app_env}")
    logger.info(f"API URL: http://localhost:{config.port}")
    app.run(host="0.0.0.0", port=config.port, debug=config.is_development)


if __name__ == "__main__":
    main()
