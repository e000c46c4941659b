"""PDF export endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from loguru import logger
from pydantic import ValidationError

from dealerdesk.render.errors import RenderError
from dealerdesk.render.options import PRESETS
from dealerdesk.render.renderer import DocumentRenderer
from dealerdesk.render.safety import safe_pdf_filename
from dealerdesk.server.dependencies import get_renderer
from dealerdesk.server.schemas import PdfRequestDTO

router = APIRouter(tags=["PDF"])


@router.post("/api/generate-pdf")
async def generate_pdf(
    body: PdfRequestDTO,
    renderer: DocumentRenderer = Depends(get_renderer),
):
    """Render an HTML document or fragment to a downloadable PDF."""
    return await _render(body, renderer, preset="document", default_filename="document.pdf")


@router.post("/api/generate-logs-pdf")
async def generate_logs_pdf(
    body: PdfRequestDTO,
    renderer: DocumentRenderer = Depends(get_renderer),
):
    """Render an activity log export (A4 landscape, narrow margins)."""
    return await _render(body, renderer, preset="logs", default_filename="logs.pdf")


async def _render(
    body: PdfRequestDTO,
    renderer: DocumentRenderer,
    *,
    preset: str,
    default_filename: str,
) -> Response:
    if not body.html.strip():
        return JSONResponse({"error": "HTML is required"}, status_code=400)

    try:
        options = PRESETS[preset].merged(body.options)
    except ValidationError as e:
        return JSONResponse({"error": "Invalid options", "details": str(e)}, status_code=400)

    try:
        pdf = await renderer.generate_pdf(body.html, options)
    except RenderError as e:
        logger.error("PDF export ({}) failed: {}", preset, e)
        return JSONResponse(
            {"error": "Failed to generate PDF", "details": str(e)},
            status_code=500,
        )

    filename = safe_pdf_filename(body.filename, default_filename)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
