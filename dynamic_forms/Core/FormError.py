from typing import Any, Optional

from pydantic import BaseModel, Field


class FormError(BaseModel):
    """An error attached to a form."""

    message: str = Field(..., description="Human readable error message")
    cause: Optional[Any] = Field(default=None, description="Exception that produced the error")
    origin: Optional[Any] = Field(default=None, description="Form the error was added to")
