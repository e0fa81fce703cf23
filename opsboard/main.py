"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from opsboard.config import get_settings
from opsboard.api.v1 import calendar, conditions

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every unhandled exception with its traceback"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content=f"Internal Server Error: {exc}", status_code=500)


def create_app() -> FastAPI:
    """
    Application factory - creates and configures the FastAPI app

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="opsboard",
        debug=settings.DEBUG,
    )

    app.add_middleware(ErrorLoggingMiddleware)

    app.include_router(conditions.router)
    app.include_router(calendar.router)

    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    logger.info("opsboard started (timezone=%s)", settings.TIMEZONE)
    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "opsboard.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
