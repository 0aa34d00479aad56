###########EXTERNAL IMPORTS############

from fastapi.requests import HTTPConnection

#######################################

#############LOCAL IMPORTS#############

import web.exceptions as api_exception

#######################################


def get_ip_address(connection: HTTPConnection) -> str:
    """
    Returns the client's IP address from a request or websocket connection.

    Raises:
        InvalidRequest: If the connection has no client information.
    """

    if connection.client is None:
        raise api_exception.InvalidRequest(api_exception.Errors.MISSING_IP)

    return connection.client.host


def get_api_url(connection: HTTPConnection) -> str:
    """
    Returns the path of the API URL from the given request or websocket connection.
    """

    return connection.url.path
