"""UI update functions for the Gradio interface.

This module provides the update functions that sit between the Gradio UI
components and the image-to-punchcard pipeline. Each call runs the
pipeline on the current image and parameters and returns values ready
for display. Results are not cached between calls.

Export files are written through a per-session SessionFileManager, kept
in a module-level registry keyed by the session id.
"""

import logging

import gradio as gr
import numpy as np
from pydantic import ValidationError

from loom_punchcards.exceptions import PunchcardError
from loom_punchcards.file_manager import SessionFileManager
from loom_punchcards.metadata import card_info, preview_cards, summarize_card_set
from loom_punchcards.models import (
    CardParams,
    ExportParams,
    ImageProcessingParams,
    ProcessingParameters,
    validate_card_type,
)
from loom_punchcards.pipeline import (
    create_cards,
    export_card_set,
    process_binary_image,
    validate_output_format,
)
from loom_punchcards.visualization import (
    create_binary_visualization,
    create_card_preview_visualization,
    create_grayscale_visualization,
)

logger = logging.getLogger(__name__)

# session id -> file manager
_file_managers: dict[str, SessionFileManager] = {}


def get_or_create_file_manager(session_id: str) -> SessionFileManager:
    """Return the file manager of a session, creating it on first use."""
    manager = _file_managers.get(session_id)
    if manager is None:
        manager = SessionFileManager(session_id)
        _file_managers[session_id] = manager
        logger.debug(f"Created file manager for session {session_id}")
    return manager


def cleanup_session(session_id: str) -> None:
    """Remove a session's files and forget its file manager.

    Unknown session ids are ignored.
    """
    manager = _file_managers.pop(session_id, None)
    if manager is not None:
        manager.cleanup_all()
        logger.debug(f"Cleaned up session {session_id}")


def cleanup_cache(session_id: str | None = None) -> None:
    """Clean up one session, or every session when `session_id` is None."""
    if session_id is not None:
        cleanup_session(session_id)
        return

    for sid in list(_file_managers):
        cleanup_session(sid)


def build_parameters(
    color_mode: int | str,
    card_type: str,
    strategy: str,
    invert: bool,
    export_format: str = "svg",
    title: str = "",
) -> ProcessingParameters:
    """Build pipeline parameters from raw UI values.

    Raises:
        gr.Error: If any value is out of range.
    """
    try:
        return ProcessingParameters(
            image=ImageProcessingParams(color_mode=int(color_mode)),
            cards=CardParams(
                card_type=validate_card_type(card_type),
                strategy=strategy,
                invert=bool(invert),
            ),
            export=ExportParams(
                format=validate_output_format(export_format), title=title or ""
            ),
        )
    except (PunchcardError, ValidationError, ValueError) as e:
        raise gr.Error(str(e)) from e


def update_binary_view(
    image: np.ndarray | None, color_mode: int | str, card_type: str, strategy: str
) -> tuple:
    """Update the grayscale and dithered grid views.

    Args:
        image: Uploaded RGB image, or None.
        color_mode: Dithering color mode (2, 4 or 8).
        card_type: Card type value, e.g. "26x8".
        strategy: Grid-to-card strategy value.

    Returns:
        Tuple of (grayscale_view, binary_view) RGB arrays, both None when
        no image is loaded.
    """
    if image is None:
        return None, None

    params = build_parameters(color_mode, card_type, strategy, False)
    try:
        result = process_binary_image(image, params.image, params.cards)
    except PunchcardError as e:
        raise gr.Error(str(e)) from e

    return (
        create_grayscale_visualization(result.grayscale),
        create_binary_visualization(result.binary_grid),
    )


def update_cards_view(
    image: np.ndarray | None,
    session_id: str,
    color_mode: int | str,
    card_type: str,
    strategy: str,
    invert: bool,
    export_format: str,
    title: str,
) -> tuple:
    """Build cards, preview the first few and write the export file.

    Args:
        image: Uploaded RGB image, or None.
        session_id: Unique session identifier for file isolation.
        color_mode: Dithering color mode (2, 4 or 8).
        card_type: Card type value.
        strategy: Grid-to-card strategy value.
        invert: Whether to invert the pattern.
        export_format: "svg" or "text".
        title: Pattern title for the exported document.

    Returns:
        Tuple of (preview_figure, preview_text, info_payload, export_path).
        All None when no image is loaded.
    """
    if image is None:
        return None, None, None, None

    params = build_parameters(
        color_mode, card_type, strategy, invert, export_format, title
    )
    try:
        image_result = process_binary_image(image, params.image, params.cards)
        card_result = create_cards(image_result, params.cards)
        export_result = export_card_set(card_result, params.export)
    except PunchcardError as e:
        raise gr.Error(str(e)) from e

    shown = preview_cards(card_result.cards)
    preview_fig = create_card_preview_visualization(shown)
    preview_text = "\n".join(card_info(card) for card in shown)
    info = summarize_card_set(card_result.cards, params.image.color_mode)

    manager = get_or_create_file_manager(session_id or "default")
    export_path = manager.write_file(
        export_result.format, export_result.content, export_result.filename
    )

    return preview_fig, preview_text, info, export_path
