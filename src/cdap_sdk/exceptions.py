from typing import Optional

from .models.enums import ErrorCode


class SDKException(Exception):
    def __init__(self, code: ErrorCode, message: str, detail=None):
        self.code = code
        self.message = message
        self.detail = detail
        super().__init__(f"{code.value}: {message}")


class ArtifactIOError(SDKException):
    """A local file (jar or json config) could not be read."""

    def __init__(self, path: str, message: str, detail=None):
        self.path = path
        super().__init__(ErrorCode.IO, message, detail)


class DecodeError(SDKException):
    """JSON body did not match the expected shape."""

    def __init__(self, message: str, detail=None, path: Optional[str] = None):
        self.path = path
        super().__init__(ErrorCode.DECODE, message, detail)


class TransportError(SDKException):
    def __init__(self, message: str, detail=None, code: ErrorCode = ErrorCode.TRANSPORT):
        super().__init__(code, message, detail)


class TimeoutException(TransportError):
    def __init__(self, message: str, detail=None):
        super().__init__(message, detail, code=ErrorCode.TIMEOUT)


class RemoteError(SDKException):
    """The registry answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str, method: str = "", url: str = ""):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url
        super().__init__(
            ErrorCode.REMOTE,
            f"{method} {url} returned HTTP {status_code}: {body}".strip(),
            {"status_code": status_code, "body": body},
        )
