"""Case model."""

from typing import Optional
from pydantic import BaseModel, Field


class Case(BaseModel):
    """Legal case that tasks are filed under."""
    id: int = Field(..., description="Case ID")
    case_number: str = Field(..., description="Case number, e.g. CASE-001")
    matter: Optional[int] = Field(None, description="Associated matter ID")
    coming_up: Optional[str] = Field(None, description="Next scheduled event")
    opened: Optional[str] = None
    last_updated: Optional[str] = None
    lawyer: Optional[str] = Field(None, description="Responsible lawyer")
    client: Optional[str] = Field(None, description="Client name")
    case_documents: int = Field(default=0, ge=0, description="Number of case documents")
