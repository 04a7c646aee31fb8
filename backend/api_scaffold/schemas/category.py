"""Category Schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryAttributes(BaseModel):
    """Writable attributes of a Category."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v
