"""Employee model."""

from pydantic import BaseModel, Field


class Employee(BaseModel):
    """Employee that tasks can be assigned to."""
    id: int = Field(..., description="Employee ID")
    full_name: str = Field(..., description="Full name")
