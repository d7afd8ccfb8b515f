"""Matter model."""

from pydantic import BaseModel, Field


class Matter(BaseModel):
    """Matter (area of law) a case belongs to."""
    id: int = Field(..., description="Matter ID")
    title: str = Field(..., description="Matter title")
