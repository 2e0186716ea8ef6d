# app.py
import errno
import logging
import os
import sys

from flask import Flask, request, jsonify, send_from_directory, abort
from werkzeug.exceptions import HTTPException
from werkzeug.utils import safe_join

from .config import FRONTEND_ROOT, STATIC_ROOT, Settings
from .diagnostics import build_diagnostics
from .providers import build_provider
from .service import INTERNAL_ERROR, METHOD_NOT_ALLOWED_ERROR, ItineraryService


# -----------------------------------------------------------------------------
# Config
# -----------------------------------------------------------------------------
settings = Settings.from_env()

logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger("app")

API_PATHS = ("/generate",)


def build_service(cfg: Settings) -> ItineraryService:
    return ItineraryService(
        provider=build_provider(cfg),
        diagnostics=build_diagnostics(cfg.response_log),
    )


def create_app(service: ItineraryService = None, frontend_root: str = FRONTEND_ROOT,
               static_root: str = STATIC_ROOT) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.config["ITINERARY_SERVICE"] = service if service is not None else build_service(settings)

    # -------------------------------------------------------------------------
    # Routes: static
    # -------------------------------------------------------------------------
    @app.route("/")
    def serve_index():
        return send_from_directory(frontend_root, "index.html")

    @app.route("/<path:filename>")
    def serve_frontend(filename):
        # Other frontend pages (results.html, ...)
        full = safe_join(frontend_root, filename)
        if full and os.path.isfile(full):
            return send_from_directory(frontend_root, filename)
        if os.path.isfile(os.path.join(frontend_root, "404.html")):
            return send_from_directory(frontend_root, "404.html"), 404
        abort(404)

    @app.route("/static/<path:path>")
    def serve_static(path):
        # JS, CSS, images
        full = safe_join(static_root, path)
        if not (full and os.path.isfile(full)):
            abort(404)
        return send_from_directory(static_root, path)

    @app.route("/healthz")
    def healthz():
        return "ok", 200

    # -------------------------------------------------------------------------
    # Itinerary endpoint
    # -------------------------------------------------------------------------
    @app.route("/generate", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
    def generate():
        """
        Body: { "startCity"?, "destination", "dates", "interests", "style" }
        Returns: { itinerary, places[] }
        """
        if request.method != "POST":
            return jsonify({"error": METHOD_NOT_ALLOWED_ERROR}), 405

        body = request.get_json(silent=True)
        status, payload = app.config["ITINERARY_SERVICE"].generate(body)
        return jsonify(payload), status

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------
    @app.errorhandler(Exception)
    def handle_error(e):
        if isinstance(e, HTTPException):
            if request.path in API_PATHS:
                return jsonify({"error": e.description}), e.code
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": INTERNAL_ERROR}), 500

    return app


app = create_app()


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------
def main():
    logger.info("Server running at http://%s:%s", settings.host, settings.port)
    try:
        app.run(host=settings.host, port=settings.port)
    except OSError as e:
        if e.errno == errno.EADDRINUSE:
            logger.error("Port %s is already in use. Stop the process using it or set a different PORT.",
                         settings.port)
        else:
            logger.error("Server error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
