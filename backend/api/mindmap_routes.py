"""Mind map endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Response
import structlog

from core.exceptions import (
    AIServiceError,
    ConfigurationError,
    GenerationInProgressError,
    LayoutError,
    MindMapError,
    ResponseFormatError,
    TopicValidationError,
    TreeValidationError,
)
from models.mindmap import Canvas, MindMapRequest, MindMapResponse, MindMapState
from services.mindmap_service import MindMapService, mindmap_service, to_response

router = APIRouter()

logger = structlog.getLogger(__name__)

ERROR_STATUS = {
    TopicValidationError: 422,
    LayoutError: 422,
    GenerationInProgressError: 409,
    ConfigurationError: 503,
    AIServiceError: 502,
    ResponseFormatError: 502,
    TreeValidationError: 502,
}


def get_mindmap_service() -> MindMapService:
    return mindmap_service


def error_status(error: MindMapError) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return code
    return 500


@router.post("/mindmaps", response_model=MindMapResponse)
async def create_mindmap(
    request: MindMapRequest,
    service: MindMapService = Depends(get_mindmap_service),
):
    """Generate a new mind map for a topic, replacing the current one."""
    canvas_args = {}
    if request.width is not None:
        canvas_args["width"] = request.width
    if request.height is not None:
        canvas_args["height"] = request.height

    try:
        result = await service.generate(request.topic, Canvas(**canvas_args))
    except MindMapError as e:
        code = error_status(e)
        logger.warning(f"[create_mindmap] failed status={code}: {e}")
        raise HTTPException(code, e.user_message)

    return to_response(result)


@router.get("/mindmaps/current", response_model=MindMapState)
async def get_current_mindmap(
    service: MindMapService = Depends(get_mindmap_service),
):
    """Get the current mind map together with the loading and error state."""
    return service.state


@router.get("/mindmaps/current/svg")
async def get_current_mindmap_svg(
    service: MindMapService = Depends(get_mindmap_service),
):
    """Get the current mind map as an SVG document."""
    if service.result is None:
        raise HTTPException(404, "No mind map has been generated yet")
    return Response(content=service.result.svg, media_type="image/svg+xml")
