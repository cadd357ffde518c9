# chat response models

from pydantic import BaseModel
from typing import Optional

class ChatResponse(BaseModel):
    """
    Successful answer for the widget.
    """
    response: str

class ChatErrorResponse(BaseModel):
    """
    Error envelope for every failed chat request; `details` carries store or upstream diagnostics.
    """
    error: str
    details: Optional[str] = None
