"""
Exception taxonomy và các error handler trả về envelope JSON thống nhất:
{"status": "error", "error": <message>, "details"?: ...}
"""
import logging

from flask import jsonify
from flask_wtf.csrf import CSRFError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger("api_logger")


class ApiError(Exception):
    """Base exception cho mọi lỗi trả về client."""

    status_code = 500

    def __init__(self, message, details=None, status_code=None, extra=None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.extra = extra or {}
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        body = {"status": "error", "error": self.message}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ValidationError(ApiError):
    status_code = 400

    def __init__(self, message="Invalid input data", details=None):
        super().__init__(message, details=details)


class UnauthorizedError(ApiError):
    status_code = 401

    def __init__(self, message="Unauthorized", details=None):
        super().__init__(message, details=details)


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class UpstreamError(ApiError):
    """Cloudflare trả về kết quả không thành công."""

    def __init__(self, message, upstream_status, details=None, extra=None):
        status = upstream_status if upstream_status >= 400 else 400
        super().__init__(message, details=details, status_code=status, extra=extra)
        self.upstream_status = upstream_status


class TransportError(ApiError):
    """Không kết nối được tới upstream (không có HTTP response)."""

    status_code = 500


class InternalError(ApiError):
    status_code = 500

    def __init__(self, message="Internal server error", details=None):
        super().__init__(message, details=details)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e.message}")
        else:
            logger.info(f"{type(e).__name__}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        return jsonify({"status": "error", "error": "Invalid CSRF token", "details": e.description}), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"status": "error", "error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify(InternalError().to_dict()), 500
