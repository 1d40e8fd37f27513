"""Data models for the Stripe onboarding assistant."""
from .catalog import Question
from .conversation import Classification, ConversationState, Role, Turn
from .intent import Intent, UserInput
from .api import ChatRequest, ChatResponse, SessionStatus

__all__ = [
    "Question",
    "Classification",
    "ConversationState",
    "Role",
    "Turn",
    "Intent",
    "UserInput",
    "ChatRequest",
    "ChatResponse",
    "SessionStatus",
]
