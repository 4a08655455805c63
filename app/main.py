import logging
import os
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

LOG_LEVEL_STR = os.getenv("LOG_LEVEL", "INFO")

LOG_LEVEL = getattr(logging, LOG_LEVEL_STR.upper(), None)
if not isinstance(LOG_LEVEL, int):
    raise ValueError(f"Invalid LOG_LEVEL: {LOG_LEVEL_STR}")

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)

from app.core.config import get_settings

# Bad configuration stops the app here.
get_settings()

from app.api.video_details import router as video_details_router
from app.core.cors import CORS_HEADERS, cors_middleware
from app.core.errors import ServiceError, UpstreamHTTPError
from app.schemas.video_details import ErrorResponse

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Video Details Proxy",
    description="Normalized YouTube video metadata and download formats via RapidAPI",
    version="1.0.0",
)

app.middleware("http")(cors_middleware)
app.include_router(video_details_router)


def _error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = ErrorResponse(error=error, message=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=content, headers={**CORS_HEADERS, **(headers or {})})


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        upstream = f" (upstream {exc.upstream_status})" if isinstance(exc, UpstreamHTTPError) else ""
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}{upstream}: {exc.message}")
    return _error_response(exc.status_code, exc.error, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error_response(400, "Invalid request body", "Expected a JSON object with a videoId string")


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
