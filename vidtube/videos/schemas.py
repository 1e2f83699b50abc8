"""
Pydantic models for Videos system query validation.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field


class VideoListQuery(BaseModel):
    """Query parameters for listing videos."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    query: Optional[str] = Field(None, description="Case-insensitive title search")
    sortBy: str = Field(default="createdAt")
    sortType: Literal["asc", "desc"] = Field(default="desc")
    userId: Optional[str] = Field(None, description="Only videos owned by this user")
