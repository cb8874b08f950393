"""Centralized error transformation for API routes.

Maps domain errors to HTTPException responses.
"""

from fastapi import HTTPException, status

from paymeta.domain.exceptions import EntityNotFoundError, InvalidUpdateTokenError

NOT_FOUND_MESSAGE = "Payment metadata not found"

DOMAIN_ERROR_STATUS_MAP: dict[type[Exception], int] = {
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidUpdateTokenError: status.HTTP_403_FORBIDDEN,
}


def map_domain_error(
    error: EntityNotFoundError | InvalidUpdateTokenError,
    *,
    hide_record_existence: bool = False,
) -> HTTPException:
    """Map a domain error to an HTTPException.

    Args:
        error: The domain error to map.
        hide_record_existence: Report a wrong token exactly like a missing
            record, so the response does not reveal whether the id exists.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    if isinstance(error, InvalidUpdateTokenError):
        if hide_record_existence:
            return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid updateToken")

    if isinstance(error, EntityNotFoundError) and error.entity_type == "RSSItem":
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="RSS Item not found")

    status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), status.HTTP_400_BAD_REQUEST)
    detail = NOT_FOUND_MESSAGE if status_code == status.HTTP_404_NOT_FOUND else str(error)
    return HTTPException(status_code=status_code, detail=detail)
