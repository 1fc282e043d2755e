"""
routes/insights.py
Report gateway for the insights API.

GET /insights/<report_name> with the shared secret in the `idp-token`
header. A bad token and an unknown report name get the same answer:
500 {"error": "Invalid request"}.
"""

import hmac
import logging

from flask import Blueprint, current_app, jsonify, request

from config.settings import API_KEY

logger = logging.getLogger(__name__)

insights_bp = Blueprint("insights", __name__, url_prefix="/insights")

TOKEN_HEADER = "idp-token"
GATEWAY_EXTENSION = "insights_gateway"

INVALID_REQUEST_STATUS = 500
INVALID_REQUEST_MESSAGE = "Invalid request"


def invalid_request_body():
    return {"error": INVALID_REQUEST_MESSAGE}


class ReportGateway:
    """
    Authenticates a caller, resolves the report and shapes the response.
    Holds no mutable state; safe to share across request threads.
    """

    def __init__(self, service, secret_store):
        self.service = service
        self.secret_store = secret_store

    def is_valid_request(self, token):
        """
        Both sides must be non-empty and equal byte for byte.
        `token` is the raw header bytes, or a str compared as UTF-8.
        """
        if not token:
            return False
        configured = self.secret_store.get(API_KEY)
        if not configured:
            return False
        if isinstance(token, str):
            token = token.encode("utf-8")
        return hmac.compare_digest(token, configured.encode("utf-8"))

    def handle(self, report_name, auth_token):
        """Return (status_code, body) for one report request."""
        if not (self.is_valid_request(auth_token) and self.service.has_report(report_name)):
            return INVALID_REQUEST_STATUS, invalid_request_body()

        result = self.service.run_report(report_name)
        if not result.ok:
            return INVALID_REQUEST_STATUS, invalid_request_body()
        return 200, result.payload


# ── Endpoint ──────────────────────────────────────────────────


def raw_header(name):
    """Header value as the bytes the client sent (WSGI decodes them as latin-1)."""
    value = request.headers.get(name)
    if value is None:
        return None
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return None


@insights_bp.route("/<report_name>", methods=["GET"])
def build_report(report_name):
    """
    GET /insights/<report_name>
    200 with the report payload, 500 with the error envelope otherwise.
    """
    gateway = current_app.extensions[GATEWAY_EXTENSION]
    status, body = gateway.handle(report_name, raw_header(TOKEN_HEADER))

    logger.info("insights:report=%r status=%d", report_name, status)
    return jsonify(body), status


@insights_bp.errorhandler(Exception)
def handle_unexpected_error(e):
    logger.error("Insights request failed: %s", e, exc_info=True)
    return jsonify(invalid_request_body()), INVALID_REQUEST_STATUS
