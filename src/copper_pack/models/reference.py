"""Account-wide reference datasets used to resolve foreign keys on records."""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field


def _to_str_id(value: Any) -> Optional[str]:
    """Copper issues IDs as numbers or numeric strings; compare them as strings."""
    return None if value is None else str(value)


CopperId = Annotated[str, BeforeValidator(_to_str_id)]
OptionalCopperId = Annotated[Optional[str], BeforeValidator(_to_str_id)]


class NamedItem(BaseModel):
    """Generic id/name reference entry (customer sources, loss reasons, contact types)."""

    id: CopperId
    name: str = ""


class CopperUser(BaseModel):
    """A user of the Copper account who can be an assignee."""

    id: CopperId
    name: Optional[str] = None
    email: Optional[str] = None


class PipelineStage(BaseModel):
    id: CopperId
    name: str = ""
    win_probability: Optional[int] = None


class Pipeline(BaseModel):
    id: CopperId
    name: str = ""
    stages: list[PipelineStage] = Field(default_factory=list)


class CustomFieldOption(BaseModel):
    id: CopperId
    name: str = ""
    rank: Optional[int] = None


class CustomFieldDefinition(BaseModel):
    """
    Account-level custom field. data_type is one of String, Text, Dropdown,
    MultiSelect, Date, Checkbox, Float, Percentage, Currency, URL, Connect.
    """

    id: CopperId
    name: str
    data_type: str = "String"
    available_on: list[str] = Field(default_factory=list)
    options: list[CustomFieldOption] = Field(default_factory=list)

    def applies_to(self, record_type: str) -> bool:
        return record_type in self.available_on


class CopperAccount(BaseModel):
    id: CopperId
    name: str = ""


class ReferenceData(BaseModel):
    """Reference datasets loaded for one invocation. Unneeded sets stay empty."""

    account_id: OptionalCopperId = None
    users: list[CopperUser] = Field(default_factory=list)
    pipelines: list[Pipeline] = Field(default_factory=list)
    customer_sources: list[NamedItem] = Field(default_factory=list)
    loss_reasons: list[NamedItem] = Field(default_factory=list)
    contact_types: list[NamedItem] = Field(default_factory=list)
    custom_field_definitions: list[CustomFieldDefinition] = Field(default_factory=list)
