from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PromptTemplate(BaseModel):
    """A reusable image/shot prompt kept in the prompt library."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(description="Stable id; presets use a fixed id to avoid duplicates")
    title: str
    prompt: str
    category_id: str = Field(default="general", alias="categoryId")
    tags: list[str] = Field(default_factory=list)
    reference: str | None = None
    is_quick_access: bool = Field(default=False, alias="isQuickAccess")
    metadata: dict[str, str] = Field(default_factory=dict)
