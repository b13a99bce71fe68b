from __future__ import annotations

import logging
import uuid

from flask import g, jsonify, request
from werkzeug.exceptions import HTTPException

from .exceptions import MediatecaError

logger = logging.getLogger(__name__)


def _json_error(status: int, message: str | None = None):
    return (
        jsonify(
            error={
                "code": status,
                "message": message or "error",
                "path": request.path,
                "request_id": getattr(g, "request_id", None),
            }
        ),
        status,
    )


def register_instrumentation(app):
    @app.before_request
    def _assign_request_id():
        rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        g.request_id = rid

    @app.after_request
    def _attach_request_id(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers["X-Request-Id"] = rid
        return resp


def register_error_handlers(app):
    register_instrumentation(app)

    @app.errorhandler(MediatecaError)
    def _domain_error(e: MediatecaError):
        if e.status_code >= 500:
            logger.error("Domain error: %s", e.message, extra={"event": "domain_error"})
        return _json_error(e.status_code, e.message)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return _json_error(e.code or 500, getattr(e, "description", None) or e.name)

    @app.errorhandler(Exception)
    def _500(e):
        # log y respuesta JSON coherente
        logger.exception("Unhandled exception", exc_info=e)
        return _json_error(500, "Internal Server Error")
