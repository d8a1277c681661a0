"""Root redirect, API status page and health check."""

import pathlib

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from src.config import settings
from src.submissions.steps import DYNAMIC_STEP_NUMBERS, FIXED_STEPS

router = APIRouter()

TEMPLATES_DIR = pathlib.Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

APP_VERSION = "1.0.0"


def _endpoint_list() -> list[dict[str, str]]:
    endpoints = [{"method": "POST", "path": "/api/step1", "label": "Step 1 data"}]
    for definition in FIXED_STEPS.values():
        label = "Final data" if definition.is_terminal else f"Step {definition.step_number} data"
        endpoints.append({"method": "POST", "path": f"/api/{definition.name}", "label": label})
    endpoints.append({
        "method": "POST",
        "path": f"/api/step{DYNAMIC_STEP_NUMBERS[0]}-{DYNAMIC_STEP_NUMBERS[-1]}",
        "label": "Additional steps",
    })
    endpoints += [
        {"method": "GET", "path": "/api/submissions", "label": "View all data"},
        {"method": "GET", "path": "/api/submissions/status/{status}", "label": "Filter by status"},
        {"method": "GET", "path": "/api/stats", "label": "Quick statistics"},
    ]
    return endpoints


@router.get("/")
async def root():
    """Send browsers to the dashboard."""
    return RedirectResponse(url=settings.dashboard_path)


@router.get("/api-status", response_class=HTMLResponse)
async def api_status(request: Request):
    """Human-readable list of the available endpoints."""
    return templates.TemplateResponse(
        request,
        "api_status.html",
        {
            "endpoints": _endpoint_list(),
            "dashboard_path": settings.dashboard_path,
        },
    )


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": APP_VERSION}
