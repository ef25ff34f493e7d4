"""Domain models for markforge.

This module contains the core domain models representing glyph runs,
wordmarks, customization devices and plans, motif specs and derived metrics.
All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel evaluation)
- Independent of fontTools and shapely implementation details

Key classes:
- GlyphRun: One character's outline, bbox and advance
- WordmarkBase: A rendered string with its glyph runs
- NotchCut / SeamCut / LigatureBridge: The closed set of devices
- CustomizationPlan: Ordered devices plus global adjustments
- MotifMarkSpec: Input to the motif generator
"""

from markforge.domain.devices import (
    BridgeLevel,
    Boldness,
    CustomizationPlan,
    DeviceSpec,
    LigatureBridge,
    NotchCut,
    NotchSide,
    Optical,
    SeamCut,
    device_from_dict,
)
from markforge.domain.glyph import BBox, FontIdentity, GlyphRun, WordmarkBase
from markforge.domain.metrics import (
    AttemptRecord,
    CandidatePath,
    CustomizationResult,
    Evaluation,
    EvaluationBreakdown,
    ManifestEntry,
    WordmarkCandidate,
    WordmarkMetrics,
)
from markforge.domain.motif import (
    Construction,
    MotifFamily,
    MotifMark,
    MotifMarkSpec,
    PositionedPath,
)

__all__: list[str] = [
    # Enums
    "BridgeLevel",
    "MotifFamily",
    "NotchSide",
    # Glyph types
    "BBox",
    "FontIdentity",
    "GlyphRun",
    "WordmarkBase",
    # Devices and plans
    "Boldness",
    "CustomizationPlan",
    "DeviceSpec",
    "LigatureBridge",
    "NotchCut",
    "Optical",
    "SeamCut",
    "device_from_dict",
    # Results
    "AttemptRecord",
    "CandidatePath",
    "CustomizationResult",
    "Evaluation",
    "EvaluationBreakdown",
    "ManifestEntry",
    "WordmarkCandidate",
    "WordmarkMetrics",
    # Motif
    "Construction",
    "MotifMark",
    "MotifMarkSpec",
    "PositionedPath",
]
