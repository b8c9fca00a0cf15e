# tubely/api/limits.py
import logging
from typing import Optional, Sequence

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tubely.models.errors import RequestBodyTooLarge

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """Caps the request body size on selected path prefixes.

    Nothing is refused up front: the check runs inside the app's receive
    call, so a route that authenticates before reading the body answers 401
    or 404 first. On the first read a declared Content-Length over the limit
    raises RequestBodyTooLarge before any byte is consumed; otherwise bytes
    are counted while they stream in and the chunk that takes the total past
    the limit raises. A body of exactly max_body_size bytes is accepted.
    """

    def __init__(self, app: ASGIApp, max_body_size: int, path_prefixes: Sequence[str] = ("/",)):
        self.app = app
        self.max_body_size = max_body_size
        self.path_prefixes = tuple(path_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.path_prefixes):
            await self.app(scope, receive, send)
            return

        declared = self._content_length(scope)
        received = 0
        limit = self.max_body_size

        async def limited_receive() -> Message:
            nonlocal received
            if declared is not None and declared > limit:
                logger.warning(f"Rejected {scope['path']}: Content-Length {declared} > {limit}")
                raise RequestBodyTooLarge("Request body too large")
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    logger.warning(f"Rejected {scope['path']}: body exceeded {limit} bytes")
                    raise RequestBodyTooLarge("Request body too large")
            return message

        await self.app(scope, limited_receive, send)

    @staticmethod
    def _content_length(scope: Scope) -> Optional[int]:
        for name, value in scope.get("headers") or []:
            if name == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None
