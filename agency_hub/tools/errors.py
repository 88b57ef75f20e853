from fastapi import HTTPException

from agency_hub.services.exceptions import ContactListError, RecordNotFoundError, ServiceError


def to_http_error(exc: ServiceError) -> HTTPException:
    """Map a service failure onto the HTTP status the routers report."""

    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ContactListError):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))
