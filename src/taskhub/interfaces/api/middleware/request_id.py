"""Request id middleware - correlates logs and error bodies with a request."""

from uuid import uuid4

import falcon.asgi
import structlog

log = structlog.get_logger()


class RequestIdMiddleware:
    """Reads or generates X-Request-ID and binds it to the structlog context."""

    header = "X-Request-ID"

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        request_id = req.get_header(self.header) or uuid4().hex
        req.context.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=req.method, path=req.path
        )
        resp.set_header(self.header, request_id)

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        log.debug("request.completed", status=resp.status, succeeded=req_succeeded)
        structlog.contextvars.clear_contextvars()
