"""Mind map generation service: one generation pass at a time, holding the current diagram."""

from typing import Awaitable, Callable, Optional

import structlog

from agents.agent.tools import create_mindmap
from core.exceptions import GenerationInProgressError, MindMapError, TopicValidationError
from models.mindmap import Canvas, MindMapResponse, MindMapResult, MindMapState
from services.layout_engine import check_drawing_area, layout_tree
from services.renderer import build_draw_calls, render_svg
from services.tree_normalizer import IdSequence, normalize_tree

logger = structlog.getLogger(__name__)

Generator = Callable[[str], Awaitable[dict]]


def validate_topic(topic: Optional[str]) -> str:
    """Return the trimmed topic, rejecting empty or whitespace-only input."""
    cleaned = (topic or "").strip()
    if not cleaned:
        raise TopicValidationError("Please enter a topic for the mind map.")
    return cleaned


def to_response(result: MindMapResult) -> MindMapResponse:
    return MindMapResponse(
        topic=result.topic,
        node_count=len(result.layout.nodes),
        tree=result.tree,
        layout=result.layout,
        svg=result.svg,
        generated_root_name=result.generated_root_name,
    )


class MindMapService:
    """
    Runs the topic -> AI -> normalize -> layout -> render pipeline.

    Only one generation may be in flight; a second request while busy is
    rejected rather than queued. A failed or rejected request never leaves a
    partial diagram behind.
    """

    def __init__(self, generator: Generator = create_mindmap):
        self.generator = generator
        self.topic: Optional[str] = None
        self.result: Optional[MindMapResult] = None
        self.error: Optional[str] = None
        self.is_loading = False

    @property
    def state(self) -> MindMapState:
        return MindMapState(
            topic=self.topic,
            is_loading=self.is_loading,
            error=self.error,
            result=to_response(self.result) if self.result else None,
        )

    async def generate(self, topic: str, canvas: Optional[Canvas] = None) -> MindMapResult:
        """
        Generate and store a new mind map.

        Args:
            topic: Requested central topic
            canvas: Target canvas, defaults from settings

        Returns:
            The new MindMapResult, which also becomes the current diagram

        Raises:
            TopicValidationError: If the topic is blank (state untouched)
            LayoutError: If the canvas has no drawing area (state untouched)
            GenerationInProgressError: If another generation is running
            MindMapError: Any failure from the pipeline, also kept in state.error
        """
        cleaned = validate_topic(topic)
        check_drawing_area(canvas or Canvas())
        if self.is_loading:
            raise GenerationInProgressError(
                "A mind map is already being generated. Please wait for it to finish."
            )

        self.is_loading = True
        self.topic = cleaned
        self.error = None
        self.result = None
        try:
            raw = await self.generator(cleaned)
            result = self.build(cleaned, raw, canvas)
        except MindMapError as e:
            logger.error(f"Error generating mind map: {e}")
            self.error = f"Failed to generate mind map: {e.user_message}"
            raise
        except Exception as e:
            logger.exception("Unexpected error generating mind map")
            self.error = "An unknown error occurred while generating the mind map."
            raise MindMapError(self.error) from e
        finally:
            self.is_loading = False

        self.result = result
        logger.info(f"Generated mind map for {cleaned} with {len(result.layout.nodes)} nodes")
        return result

    def build(self, topic: str, raw: dict, canvas: Optional[Canvas] = None) -> MindMapResult:
        """Run normalization, layout and rendering on an already generated raw tree."""
        raw_name = raw.get("name") if isinstance(raw, dict) else None
        tree = normalize_tree(raw, topic, sequence=IdSequence())
        layout = layout_tree(tree, canvas)
        diagram = build_draw_calls(layout)
        return MindMapResult(
            topic=topic,
            tree=tree,
            layout=layout,
            diagram=diagram,
            svg=render_svg(diagram),
            generated_root_name=raw_name if isinstance(raw_name, str) else None,
        )


# Singleton instance
mindmap_service = MindMapService()
