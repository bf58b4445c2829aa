"""Data models for raw records and reference datasets."""

from copper_pack.models.raw import RawRecord
from copper_pack.models.reference import (
    CopperAccount,
    CopperUser,
    CustomFieldDefinition,
    CustomFieldOption,
    NamedItem,
    Pipeline,
    PipelineStage,
    ReferenceData,
)

__all__ = [
    "CopperAccount",
    "CopperUser",
    "CustomFieldDefinition",
    "CustomFieldOption",
    "NamedItem",
    "Pipeline",
    "PipelineStage",
    "RawRecord",
    "ReferenceData",
]
