"""Domain models for the transcode controller."""

from transcode_controller.domain.models import (
    ClipWindow,
    ConversionRequest,
    EncodePlan,
    JobStatus,
    MediaKind,
    Outcome,
    PlanBranch,
    QualityProfile,
    QualityTier,
    TargetFormat,
)

__all__ = [
    "ClipWindow",
    "ConversionRequest",
    "EncodePlan",
    "JobStatus",
    "MediaKind",
    "Outcome",
    "PlanBranch",
    "QualityProfile",
    "QualityTier",
    "TargetFormat",
]
