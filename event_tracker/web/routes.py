"""HTTP endpoints: event CRUD, streamed scan trigger and status."""

import queue
import threading
from typing import Iterator

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from event_tracker.domain.models import EventDraft
from event_tracker.logging import get_logger
from event_tracker.persistence.exceptions import (
    DuplicateEventError,
    PersistenceError,
    RecordNotFoundError,
)
from event_tracker.pipeline.models import ProgressLevel, ProgressMessage

from .services import get_services

logger = get_logger(__name__, component="api")

api_bp = Blueprint("api", __name__)

# Marks the end of a scan stream
_DONE = object()


def _validation_errors(error: ValidationError) -> list:
    return [
        f"{'.'.join(str(loc) for loc in detail['loc']) or 'body'}: {detail['msg']}"
        for detail in error.errors()
    ]


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None
    return body


@api_bp.errorhandler(RecordNotFoundError)
def handle_not_found(error):
    return jsonify({"error": "Not found"}), 404


@api_bp.errorhandler(DuplicateEventError)
def handle_duplicate(error):
    return jsonify({"error": str(error), "existingId": error.existing_id}), 409


@api_bp.errorhandler(ValidationError)
def handle_invalid(error):
    return jsonify({"error": "Invalid event", "details": _validation_errors(error)}), 400


@api_bp.errorhandler(PersistenceError)
def handle_storage_error(error):
    logger.error(
        f"Storage error: {error}",
        extra={"event": "api.storage.error", "error_type": type(error).__name__},
    )
    return jsonify({"error": "Storage error"}), 500


@api_bp.route("/api/events", methods=["GET"])
def list_events():
    services = get_services()
    return jsonify(
        {
            "events": [event.to_record() for event in services.events.list_events()],
            "meta": services.metadata.get().to_record(),
        }
    )


@api_bp.route("/api/events", methods=["POST"])
def create_event():
    body = _json_body()
    if body is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400

    draft = EventDraft.model_validate(body)
    event = get_services().events.add(draft)
    return jsonify(event.to_record())


@api_bp.route("/api/events/<int:event_id>", methods=["PUT"])
def update_event(event_id: int):
    body = _json_body()
    if body is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400

    event = get_services().events.update(event_id, body)
    return jsonify(event.to_record())


@api_bp.route("/api/events/<int:event_id>", methods=["DELETE"])
def delete_event(event_id: int):
    get_services().events.delete(event_id)
    return jsonify({"ok": True})


@api_bp.route("/api/scan", methods=["GET"])
def scan():
    """Run a scan and stream its progress as server-sent events.

    The scan runs in a worker thread; a client that disconnects stops
    receiving messages but does not stop the scan.
    """
    pipeline = get_services().pipeline
    messages: "queue.Queue" = queue.Queue()

    def worker() -> None:
        try:
            pipeline.run_scan(progress=messages.put)
        except Exception as e:
            logger.error(
                f"Scan worker crashed: {e}",
                extra={"event": "api.scan.crashed", "error_type": type(e).__name__},
                exc_info=True,
            )
            messages.put(ProgressMessage(ProgressLevel.ERR, str(e)))
        finally:
            messages.put(_DONE)

    threading.Thread(target=worker, name="scan-stream", daemon=True).start()

    def stream() -> Iterator[str]:
        while True:
            item = messages.get()
            if item is _DONE:
                yield "data: done\n\n"
                return
            yield f"data: {item}\n\n"

    return Response(
        stream(),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@api_bp.route("/api/status", methods=["GET"])
def status():
    services = get_services()
    return jsonify(
        {
            **services.metadata.get().to_record(),
            "scanInProgress": services.pipeline.is_scan_in_progress(),
            "hasApiKey": services.env_config.has_api_key,
        }
    )
