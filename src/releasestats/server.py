"""HTTP API serving dashboard chart payloads."""

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from rich.console import Console
from rich.traceback import Traceback

from releasestats.dashboard import DashboardService, ReportCache
from releasestats.storage import ReportReadError, ReportStorage

console = Console(stderr=True)

CHART_NOT_FOUND = "Chart not found."
LOAD_FAILED = "Failed to load chart data."

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def get_service(request: Request) -> DashboardService:
    return request.app.state.dashboard


@router.get("/charts")
def list_charts(request: Request) -> dict:
    charts = get_service(request).list_charts()
    return {"success": True, "data": [chart.to_dict() for chart in charts]}


@router.get("/charts/{chart_id}")
def get_chart(chart_id: str, request: Request):
    chart = get_service(request).get_chart(chart_id)
    if chart is None:
        return JSONResponse(status_code=404, content={"success": False, "error": CHART_NOT_FOUND})
    return {"success": True, "data": chart.to_dict()}


async def report_read_error_handler(request: Request, exc: ReportReadError) -> JSONResponse:
    console.log(f"[red]{request.url.path}: {exc}[/red]")
    return JSONResponse(status_code=500, content={"success": False, "error": LOAD_FAILED})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    console.log(f"[red]{request.url.path}: unexpected error[/red]")
    console.print(Traceback.from_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content={"success": False, "error": LOAD_FAILED})


def create_app(service: DashboardService) -> FastAPI:
    """Create the API application around a dashboard service.

    Args:
        service: Service shared by all requests for the process lifetime.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(title="Release Stats Dashboard API")
    app.state.dashboard = service
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ReportReadError, report_read_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(router)
    return app


def create_app_from_storage(storage: ReportStorage) -> FastAPI:
    """Create the API application reading reports from ``storage``."""
    return create_app(DashboardService(ReportCache(storage)))
