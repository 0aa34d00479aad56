###########EXTERNAL IMPORTS############

from fastapi import APIRouter, Request, Depends
from fastapi.responses import JSONResponse, HTMLResponse

#######################################

#############LOCAL IMPORTS#############

from analytics.exceptions import TelemetryUnavailable
from analytics.snapshot import SnapshotBuilder
from web.api.decorator import api_endpoint, EndpointConfigs
from web.dependencies import services
import web.exceptions as api_exception

#######################################

router = APIRouter(tags=["system"])

INDEX_MESSAGE = 'Servidor de monitoreo activo. Usa <a href="/api/sistema">/api/sistema</a>'


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """Health check pointing to the snapshot endpoint."""

    return HTMLResponse(content=INDEX_MESSAGE)


@router.get("/api/sistema")
@api_endpoint(EndpointConfigs.SYSTEM)
async def get_system_data(
    request: Request,
    builder: SnapshotBuilder = Depends(services.get_snapshot_builder),
) -> JSONResponse:
    """Builds and returns a fresh system snapshot."""

    try:
        snapshot = await builder.build_snapshot()
    except TelemetryUnavailable:
        raise api_exception.SystemDataUnavailable(api_exception.Errors.SYSTEM.DATA_UNAVAILABLE)

    return JSONResponse(content=snapshot.get_data())
