"""
WSGI entry point for Gunicorn:

    gunicorn backend.wsgi:application
"""
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

try:
    logger.info("Attempting to import app from backend.app...")
    from .app import app

    logger.info("Successfully imported Flask app")
    logger.info("App routes: %s", [str(rule) for rule in app.url_map.iter_rules()])

    # This is what Gunicorn will use
    application = app

except Exception as e:
    logger.error("Failed to import app: %s", e, exc_info=True)
    raise

if __name__ == "__main__":
    app.run()
