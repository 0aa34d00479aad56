###########EXTERNAL IMPORTS############

from dataclasses import dataclass
from typing import Dict, Any, Optional

#######################################

#############LOCAL IMPORTS#############

#######################################


@dataclass
class APIErrorDef:
    """Defines a canonical API error with status code, identifier, and default message."""

    status_code: int
    error_section: str
    error_id: str
    default_message: str


class APIException(Exception):
    """Base exception for API errors constructed from a centralized error definition."""

    def __init__(
        self,
        error: APIErrorDef,
        message: str | None = None,
        details: Optional[Dict[str, Any]] = None,
    ):

        self.status_code = error.status_code
        self.error_id = error.error_id
        self.error_section = error.error_section
        self.message = message or error.default_message
        self.details = details or {}
        super().__init__(self.message)


##########     G E N E R A L     E X C E P T I O N S     ##########


class InvalidRequest(APIException):
    """Raised when a request is malformed or contains invalid data."""

    pass


##########     S Y S T E M     E X C E P T I O N S     ##########


class SystemDataUnavailable(APIException):
    """Raised when the system snapshot could not be built."""

    pass


##########     C E N T R A L I Z E D     E R R O R S     O B J E C T     ##########


class Errors:
    MISSING_IP = APIErrorDef(
        status_code=400,
        error_section="GLOBAL",
        error_id="INVALID_IP",
        default_message="Missing or invalid IP from request.",
    )
    INTERNAL_SERVER_ERROR = APIErrorDef(
        status_code=500,
        error_section="GLOBAL",
        error_id="INTERNAL_SERVER_ERROR",
        default_message="Got an unexpected internal server error.",
    )

    class SYSTEM:
        DATA_UNAVAILABLE = APIErrorDef(
            status_code=500,
            error_section="SYSTEM",
            error_id="DATA_UNAVAILABLE",
            default_message="Error al obtener datos",
        )
