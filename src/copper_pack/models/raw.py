"""Raw Copper record representation before enrichment."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RawRecord(BaseModel):
    """
    A record body exactly as Copper returned it.
    Never mutated; enrichment produces a separate map of computed fields.
    """

    model_config = ConfigDict(frozen=True)

    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def id(self) -> Optional[str]:
        value = self.data.get("id")
        return None if value is None else str(value)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)
