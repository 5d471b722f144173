"""
Translation of service errors into HTTP responses.
"""

from fastapi import HTTPException, status

from library_api.app.core.errors import ConflictError, LibraryError, NotFoundError, ValidationError


def http_error(exc: LibraryError) -> HTTPException:
    """Build the ``HTTPException`` matching a service error.

    ``NotFoundError`` maps to 404, ``ConflictError`` to 409 and
    ``ValidationError`` to 422.  Any other ``LibraryError`` is a bad
    request.
    """
    if isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, ValidationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status_code, detail=str(exc))
