"""Health and browser availability endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from dealerdesk import __version__
from dealerdesk.render.renderer import DocumentRenderer
from dealerdesk.server.dependencies import get_renderer
from dealerdesk.server.schemas import BrowserStatusDTO, HealthResponseDTO

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponseDTO)
async def health_check():
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        version=__version__,
    )


@router.get("/api/check-chrome", response_model=BrowserStatusDTO, response_model_by_alias=True)
async def check_chrome(renderer: DocumentRenderer = Depends(get_renderer)):
    """Report which browser the PDF renderer would use, without launching it."""
    status = renderer.browsers.locator.describe()
    return BrowserStatusDTO(running=renderer.browsers.is_running, **status)
