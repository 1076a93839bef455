"""Domain models for the loom-punchcards application.

This module provides a centralized location for all data models used throughout
the image-to-punchcard conversion pipeline. It includes:

- Core domain models (Card, CardDimensions, Metadata)
- Pipeline processing stage results (ImageResult, CardSetResult, ExportResult)
- Configuration parameters for each processing stage
- SVG layout geometry and visualization data containers

All models are built using Pydantic for data validation and serialization,
ensuring type safety and clear interfaces between pipeline components.
"""

# Re-export core models
from loom_punchcards.models.core_models import (
    Card,
    CardDimensions,
    CardStrategy,
    CardType,
    Metadata,
    card_type_for_hole_count,
    get_card_dimensions,
    validate_card_type,
)

# Re-export pipeline models
from loom_punchcards.models.pipeline_models import (
    ImageResult,
    CardSetResult,
    ExportResult,
)

# Re-export setting models
from loom_punchcards.models.settings_models import (
    OutputFormat,
    ImageProcessingParams,
    CardParams,
    SvgExportParams,
    TextExportParams,
    ExportParams,
    ProcessingParameters,
)

# Re-export layout models
from loom_punchcards.models.layout_models import (
    CardLayout,
    GridLine,
    HoleMark,
    TextMark,
)

# Re-export visualization models
from loom_punchcards.models.visualization_models import VisualizationSet
