"""Image-to-punchcard conversion library.

This package converts raster images into sets of Jacquard loom punchcards.
It includes image processing, card construction, and export to SVG and a
plain-text format that can be parsed back.

The main processing pipeline consists of:
1. Image decoding and grayscale conversion
2. Nearest-neighbour resampling to the card geometry
3. Floyd-Steinberg dithering to a binary hole grid
4. Cutting the grid into cards and computing metadata
5. Export as SVG or text, plus previews for the web interface

Example:
    Basic usage through the pipeline API:

    >>> from loom_punchcards.pipeline import process_complete_pipeline
    >>> from loom_punchcards.models import ProcessingParameters
    >>>
    >>> with open("pattern.png", "rb") as f:
    ...     data = f.read()
    >>> params = ProcessingParameters()
    >>> image_result, card_result, export_result = process_complete_pipeline(data, params)
"""
