###########EXTERNAL IMPORTS############

from functools import wraps
from typing import Dict, Any, Callable, Awaitable
from dataclasses import dataclass, field
from fastapi import Request
from fastapi.responses import JSONResponse

#######################################

#############LOCAL IMPORTS#############

from util.debug import LoggerManager
import util.functions.web as web_util
import web.exceptions as api_exception

#######################################


EndpointFunc = Callable[..., Awaitable[JSONResponse]]


@dataclass
class APIMethodConfig:
    """
    Configuration for API endpoint error reporting.

    Attributes:
        fallback_error: Error returned to the client when the endpoint fails with an unexpected exception.
    """

    fallback_error: api_exception.APIErrorDef = field(default_factory=lambda: api_exception.Errors.INTERNAL_SERVER_ERROR)


def api_endpoint(config: APIMethodConfig):
    """
    Wraps an endpoint so that every failure becomes a JSON error response.

    The client only receives the error message and code of the error definition;
    internal details are logged and never sent in the response.
    """

    def decorator(func: EndpointFunc) -> Callable:
        @wraps(func)
        async def wrapper(request: Request, **kwargs) -> JSONResponse:

            logger = LoggerManager.get_logger(__name__)

            try:
                return await func(request, **kwargs)  # Call the core endpoint function

            except api_exception.APIException as e:
                logger.warning(f"Failed {web_util.get_api_url(request)} API due to error: {str(e.message)}")
                content: Dict[str, Any] = {}
                content["error"] = e.message
                content["error_code"] = e.error_id
                content.update(e.details)
                return JSONResponse(status_code=e.status_code, content=content)

            except Exception as e:
                logger.exception(f"Failed {web_util.get_api_url(request)} API due to server error: {str(e)}")
                content: Dict[str, Any] = {}
                content["error"] = config.fallback_error.default_message
                content["error_code"] = config.fallback_error.error_id
                return JSONResponse(status_code=config.fallback_error.status_code, content=content)

        return wrapper

    return decorator


# Preset configurations
class EndpointConfigs:
    """Presets for the endpoint patterns used by the routers."""

    SYSTEM = APIMethodConfig(fallback_error=api_exception.Errors.SYSTEM.DATA_UNAVAILABLE)
