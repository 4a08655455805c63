"""Error taxonomy shared by the upstream client and the HTTP adapter.

Each error carries the HTTP status and the short ``error`` label the
adapter renders as ``{"success": false, "error": ..., "message": ...}``.
"""

from typing import Optional


class ServiceError(Exception):
    status_code = 500
    error = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ):
        super().__init__(message or self.error)
        self.message = message or self.error
        if status_code is not None:
            self.status_code = status_code
        if error is not None:
            self.error = error


class InvalidRequestError(ServiceError):
    status_code = 400
    error = "Bad Request"


class ConfigurationError(ServiceError):
    status_code = 500
    error = "API key not configured on server"


class UpstreamError(ServiceError):
    status_code = 500
    error = "Upstream API Error"


class UpstreamHTTPError(UpstreamError):
    def __init__(self, upstream_status: int, message: Optional[str] = None):
        status = upstream_status if 400 <= upstream_status < 600 else 500
        super().__init__(message or f"API returned {upstream_status}", status_code=status)
        self.upstream_status = upstream_status


class UpstreamNetworkError(UpstreamError):
    status_code = 503
    error = "Network Error"


class UpstreamTimeoutError(UpstreamError):
    status_code = 408
    error = "Request Timeout"
