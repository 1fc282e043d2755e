"""
IDP Insights API
GET /insights/<report_name>: read-only platform reports for insight dashboards
"""

from flask import Flask
import logging
import os
from dotenv import load_dotenv

# Before db is imported: DATABASE_URL may come from .env
load_dotenv()

from db import SessionLocal, engine, init_db  # noqa: E402
from routes.insights import insights_bp, ReportGateway, GATEWAY_EXTENSION  # noqa: E402
from services.insight_service import InsightService  # noqa: E402
from services.platform_store import PlatformStore  # noqa: E402
from config.settings import SettingsStore  # noqa: E402

logger = logging.getLogger(__name__)


# =========================
# App Initialization
# =========================

def create_app(session_factory=None, bind=None):
    """
    Build the Flask app.

    `session_factory` / `bind` default to db.SessionLocal / db.engine;
    tests pass their own to run against a throwaway database.
    """
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

    session_factory = session_factory or SessionLocal
    init_db(bind=bind or engine)

    app = Flask(__name__)
    # Keep report fields in handler order
    app.json.sort_keys = False

    service = InsightService(PlatformStore(session_factory))
    settings = SettingsStore(session_factory)
    app.extensions[GATEWAY_EXTENSION] = ReportGateway(service, settings.read_only())

    app.register_blueprint(insights_bp)

    @app.route("/health", methods=["GET"])
    def health():
        return {"status": "ok", "service": "idp-insights"}, 200

    logger.info("IDP Insights ready: reports=%s", sorted(service.registry))
    return app


if __name__ == "__main__":
    create_app().run(debug=True, port=int(os.getenv("PORT", "5000")))
