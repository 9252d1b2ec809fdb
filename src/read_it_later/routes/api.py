"""API routes blueprint."""

import structlog
from flask import Blueprint, current_app, jsonify, request

from .. import __version__

log = structlog.get_logger()

api_bp = Blueprint("api", __name__, url_prefix="/api")


@api_bp.route("/health")
def health():
    """GET /api/health - Health check endpoint."""
    return jsonify({"status": "ok", "version": __version__})


@api_bp.route("/notes", methods=["POST"])
def create_note():
    """POST /api/notes - Turn clipboard content into a stored note.

    Accepts JSON ``{"content": "...", "append": false}`` or the same
    fields as form data.
    """
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"success": False, "error": "Request body must be a JSON object"}), 400
        content = data.get("content", "")
        append = data.get("append", False)
    else:
        content = request.form.get("content", "")
        append = request.form.get("append", "false").lower() in ("true", "1", "yes")

    if not isinstance(content, str) or not content.strip():
        return jsonify({"success": False, "error": "No content provided"}), 400
    if not isinstance(append, bool):
        return jsonify({"success": False, "error": "append must be a boolean"}), 400

    log.info("note_requested", append=append, content_length=len(content))

    clipper = current_app.config["CLIPPER"]
    run_async = current_app.config["RUN_ASYNC"]
    result = run_async(clipper.process_clipboard(content, append=append))

    if not result.success:
        return jsonify({"success": False, "error": result.error}), 422

    return (
        jsonify({"success": True, "filename": result.filename, "path": str(result.path)}),
        201,
    )
