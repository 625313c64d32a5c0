"""Flask application factory."""

from pathlib import Path

from flask import Flask, abort

from event_tracker.config.environment import EnvironmentConfig
from event_tracker.logging import get_logger
from event_tracker.persistence.repositories import EventRepository, MetadataRepository
from event_tracker.pipeline.runner import ScanPipeline

from .routes import api_bp
from .services import EXTENSION_KEY, Services

logger = get_logger(__name__, component="api")


def create_app(
    pipeline: ScanPipeline,
    events: EventRepository,
    metadata: MetadataRepository,
    env_config: EnvironmentConfig,
    static_dir: str = "public",
) -> Flask:
    """
    Build the Flask application.

    Args:
        pipeline: Scan pipeline triggered by GET /api/scan
        events: Event repository behind the CRUD endpoints
        metadata: Scan metadata repository
        env_config: Environment configuration (API key presence is reported)
        static_dir: Directory served at / (resolved against the working directory)
    """
    static_path = Path(static_dir).resolve()
    app = Flask(__name__, static_folder=str(static_path), static_url_path="")
    app.json.sort_keys = False
    app.extensions[EXTENSION_KEY] = Services(
        pipeline=pipeline,
        events=events,
        metadata=metadata,
        env_config=env_config,
    )
    app.register_blueprint(api_bp)

    @app.route("/")
    def index():
        if not (static_path / "index.html").is_file():
            abort(404)
        return app.send_static_file("index.html")

    logger.debug(
        "Flask application created",
        extra={"event": "api.app.created", "static_dir": str(static_path)},
    )
    return app
