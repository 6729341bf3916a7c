"""Error handlers - map domain exceptions to JSON error responses."""

import falcon
import falcon.asgi
import structlog

from taskhub.domain.exceptions import TaskHubError

log = structlog.get_logger()

# codes for errors Falcon raises itself (routing, media parsing)
_HTTP_CODES = {
    400: "VALIDATION_ERROR",
    401: "AUTHENTICATION_REQUIRED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    415: "UNSUPPORTED_MEDIA_TYPE",
}


def _body(req: falcon.asgi.Request, code: str, message: str) -> dict:
    return {
        "error": code,
        "message": message,
        "request_id": getattr(req.context, "request_id", None),
    }


def register_error_handlers(app: falcon.asgi.App, debug: bool = False) -> None:
    """Register the domain error handler, the Falcon error handler and the 500 fallback."""

    async def handle_domain_error(req, resp, ex: TaskHubError, params) -> None:
        if ex.status >= 500:
            log.error("request.failed", code=ex.code, error=str(ex))
        resp.status = falcon.code_to_http_status(ex.status)
        resp.media = _body(req, ex.code, ex.message or str(ex))

    async def handle_http_error(req, resp, ex: falcon.HTTPError, params) -> None:
        status = falcon.http_status_to_code(ex.status)
        resp.status = falcon.code_to_http_status(status)
        resp.media = _body(
            req, _HTTP_CODES.get(status, "HTTP_ERROR"), ex.description or str(ex.title)
        )

    async def handle_unexpected(req, resp, ex: Exception, params) -> None:
        log.error("request.unhandled_exception", exc_info=ex)
        resp.status = falcon.HTTP_500
        message = f"{type(ex).__name__}: {ex}" if debug else "Internal server error"
        resp.media = _body(req, "INTERNAL_ERROR", message)

    app.add_error_handler(Exception, handle_unexpected)
    app.add_error_handler(falcon.HTTPError, handle_http_error)
    app.add_error_handler(TaskHubError, handle_domain_error)
