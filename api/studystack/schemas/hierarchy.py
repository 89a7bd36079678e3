"""
Hierarchy schemas.
"""
from pydantic import BaseModel, Field


class RenameRequest(BaseModel):
    """Request schema for renaming a hierarchy node."""
    new_name: str = Field(..., description="New name for the node")


class RenameResponse(BaseModel):
    success: bool = True
    modified_count: int


class DeleteResponse(BaseModel):
    success: bool = True
    deleted_count: int
