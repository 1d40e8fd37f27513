"""Tagged user input models."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Intent(str, Enum):
    """What a submission asks the flow to do."""
    START = "start"
    ANSWER = "answer"
    EDIT_SECTION = "edit_section"
    CONTINUE = "continue"
    EDIT_INTEGRATION = "edit_integration"
    WALKTHROUGH = "walkthrough"


@dataclass(frozen=True)
class UserInput:
    """A submission with its intent already decided."""
    intent: Intent
    text: str = ""
    section: Optional[str] = None  # only for EDIT_SECTION
