"""Gradio web interface for the image-to-punchcard converter.

This module creates and configures the web application. Users upload an
image, choose a color mode, a card type and an output format, and get a
preview of the first cards, summary statistics and a downloadable SVG or
text file.

The interface is organized into sections corresponding to each processing stage:
- Image processing (grayscale, resampling, dithering)
- Card building and preview
- Export
"""

import logging
import os
from uuid import uuid4

import gradio as gr

from loom_punchcards.image_processing import COLOR_MODES, describe_color_mode
from loom_punchcards.models import CardStrategy, CardType, OutputFormat
from loom_punchcards.ui_updates import (
    cleanup_session,
    update_binary_view,
    update_cards_view,
)

logger = logging.getLogger(__name__)

DEFAULT_PORT = 7860

strategy_descriptions = {
    CardStrategy.ROW_RESHAPE.value: "Each grid row becomes one card (canonical layout).",
    CardStrategy.ROW_SPLIT.value: "Consecutive grid rows are stacked into cards; the last card is padded.",
}


def cleanup_session_handler(session_id: str | None) -> None:
    """Clean up session files when the user disconnects."""
    if session_id is None:
        return
    try:
        cleanup_session(session_id)
    except OSError as e:
        logger.warning(f"Cleanup failed for session {session_id}: {e}")


def create_gradio_interface() -> gr.Blocks:
    """Create and configure the main Gradio web interface.

    Returns:
        Configured Gradio Blocks interface ready for launching.
    """
    # Check every 30 minutes, delete files older than 1 hour
    with gr.Blocks(
        title="Jacquard Loom Punchcard Generator", delete_cache=(1800, 3600)
    ) as interface:
        gr.Markdown("# Jacquard Loom Punchcard Generator")
        gr.Markdown(
            "Upload an image to turn it into a set of punchcards for a Jacquard loom. "
            "Adjust parameters and watch each step update."
        )

        # Per-session id; files are removed when the session state expires
        session_state = gr.State(None, delete_callback=cleanup_session_handler)

        with gr.Row():
            with gr.Column(scale=1):
                source_image = gr.Image(label="Source Image", type="numpy", height=240)

                # 1. Image Processing
                with gr.Group():
                    gr.Markdown("### 1. Image Processing")
                    color_mode = gr.Radio(
                        choices=list(COLOR_MODES),
                        value=2,
                        label="Color Mode",
                        info=describe_color_mode(2),
                    )
                    with gr.Row():
                        grayscale_view = gr.Image(label="Grayscale", height=200)
                        binary_view = gr.Image(label="Dithered Grid", height=200)

                # 2. Cards
                with gr.Group():
                    gr.Markdown("### 2. Cards")
                    card_type = gr.Radio(
                        choices=[t.value for t in CardType],
                        value=CardType.SMALL.value,
                        label="Card Type",
                        info="Hole columns x rows per card.",
                    )
                    strategy = gr.Radio(
                        choices=list(strategy_descriptions),
                        value=CardStrategy.ROW_RESHAPE.value,
                        label="Card Strategy",
                    )
                    strategy_description = gr.Markdown(
                        strategy_descriptions[CardStrategy.ROW_RESHAPE.value]
                    )
                    invert = gr.Checkbox(
                        label="Invert Pattern",
                        value=False,
                        info="Swap holes and blanks.",
                    )
                    card_preview = gr.Plot(label="Card Preview")
                    preview_text = gr.Textbox(label="Previewed Cards", lines=3)
                    card_info = gr.JSON(label="Card Set Info")

                # 3. Export
                with gr.Group():
                    gr.Markdown("### 3. Export")
                    export_format = gr.Radio(
                        choices=[f.value for f in OutputFormat],
                        value=OutputFormat.SVG.value,
                        label="Format",
                    )
                    title = gr.Textbox(label="Pattern Title", value="")
                    export_file = gr.File(label="Download Punchcards", type="filepath")

        interface.load(fn=lambda: str(uuid4()), outputs=[session_state])

        image_params = [color_mode, card_type, strategy]
        card_params = [invert, export_format, title]

        color_mode.change(
            fn=lambda x: gr.update(info=describe_color_mode(int(x))),
            inputs=[color_mode],
            outputs=[color_mode],
        )
        strategy.change(
            fn=lambda x: strategy_descriptions[x],
            inputs=[strategy],
            outputs=[strategy_description],
        )

        for p in [source_image] + image_params:
            p.change(
                fn=update_binary_view,
                inputs=[source_image] + image_params,
                outputs=[grayscale_view, binary_view],
            )

        for p in [source_image] + image_params + card_params:
            p.change(
                fn=update_cards_view,
                inputs=[source_image, session_state] + image_params + card_params,
                outputs=[card_preview, preview_text, card_info, export_file],
            )

    return interface


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Reduce logging verbosity for asyncio to suppress connection noise
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    port = int(os.environ.get("PORT", DEFAULT_PORT))
    logger.info(f"Starting punchcard generator on port {port}")

    demo = create_gradio_interface()
    demo.launch(
        share=False,
        show_error=True,
        server_name="0.0.0.0",
        server_port=port,
    )
