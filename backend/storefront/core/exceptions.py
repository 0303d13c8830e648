from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UpstreamError(Exception):
    """The upstream catalog could not deliver usable data."""


class UpstreamNotConfiguredError(UpstreamError):
    def __init__(self, detail: str = "Printify credentials are not configured"):
        super().__init__(detail)


class InvalidCatalogResponseError(UpstreamError):
    def __init__(self, detail: str = "Invalid response structure from Printify API"):
        super().__init__(detail)
