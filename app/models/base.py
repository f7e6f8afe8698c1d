"""
Shared response models.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional


class BaseResponse(BaseModel):
    """
    Base response model for API responses without a richer payload.
    """
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
