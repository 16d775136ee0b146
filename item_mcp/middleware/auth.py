"""Simple API Key authentication middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from item_mcp.config import get_settings

PUBLIC_PATHS = frozenset({"/", "/health"})


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Require ``Authorization: Bearer <MCP_API_KEY>`` on every non-public path."""

    async def dispatch(self, request, call_next):
        if request.url.path in PUBLIC_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        expected_key = get_settings().mcp_api_key
        if not expected_key:
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            return self._unauthorized("Missing or invalid Authorization header")

        token = auth_header[len("Bearer ") :]
        if token != expected_key:
            return self._unauthorized("Invalid access token")

        return await call_next(request)

    @staticmethod
    def _unauthorized(message: str) -> JSONResponse:
        return JSONResponse(
            {
                "content": [{"type": "text", "text": message}],
                "error": "Unauthorized",
                "isError": True,
            },
            status_code=401,
            headers={"WWW-Authenticate": 'Bearer realm="Item Search MCP Server"'},
        )
