"""Request and response schemas for the chat API."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models.intent import Intent


class ChatRequest(BaseModel):
    """A single submission from the chat widget."""
    message: str = Field(default="", max_length=2000)
    session_id: Optional[str] = None
    intent: Optional[Intent] = None
    section: Optional[str] = None


class ChatResponse(BaseModel):
    """Render payload returned to the chat widget."""
    content: str
    suggested_responses: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    session_id: str
    question_index: int
    complete: bool


class SessionStatus(BaseModel):
    """Progress snapshot of a session."""
    session_id: str
    question_index: int
    complete: bool
    answers: Dict[str, str] = Field(default_factory=dict)  # section -> option
