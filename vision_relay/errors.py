"""Error taxonomy of the relay. Every error is terminal and rendered as plain text."""

from __future__ import annotations

from fastapi import HTTPException, status


class MethodNotAllowed(HTTPException):
    def __init__(self, detail: str = "Method Not Allowed"):
        super().__init__(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail=detail,
            headers={"Allow": "POST, OPTIONS"},
        )


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequest(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UpstreamError(HTTPException):
    """Upstream failure. The detail is fixed and safe to show to callers."""

    def __init__(self, detail: str = "Error from upstream model service"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
