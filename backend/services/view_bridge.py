"""
View bridge between the chat widget and the flow controller.

The widget sends text (and, for chip clicks, an explicit intent); the
bridge decides the intent, runs one turn under the session lock and turns
the FlowResponse into a render payload.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from models.catalog import normalize_text
from models.intent import Intent, UserInput
from services.conversation_manager import ConversationManager, Session
from services.flow_controller import FlowController

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Sorry, there was an error processing your request."


class TurnInProgressError(Exception):
    """Raised when a session already has a turn in flight."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"A turn is already in progress for session {session_id}")


@dataclass
class RenderPayload:
    """What the widget renders for one turn."""
    content: str
    suggested_responses: List[str] = field(default_factory=list)
    error: Optional[str] = None
    session_id: str = ""
    question_index: int = 0
    complete: bool = False


class ViewBridge:
    """Relays widget submissions to the flow controller, one turn at a time per session."""

    def __init__(self, flow_controller: FlowController, conversation_manager: ConversationManager):
        self.flow_controller = flow_controller
        self.conversation_manager = conversation_manager

    def submit_text(
        self,
        session_id: Optional[str],
        text: str,
        intent: Optional[Intent] = None,
        section: Optional[str] = None,
    ) -> RenderPayload:
        """
        Run one user turn.

        Args:
            session_id: Session of the submitting tab (a new one is created if unknown)
            text: Submitted text
            intent: Intent tagged by the widget, if it knows it (e.g. a chip click)
            section: Section name for an EDIT_SECTION intent

        Returns:
            RenderPayload for the widget

        Raises:
            TurnInProgressError: If the session is still processing a previous turn
        """
        session = self.conversation_manager.get_or_create_session(session_id)

        if not session.lock.acquire(blocking=False):
            logger.warning(
                "Rejected submission while a turn is in flight",
                extra={"session_id": session.session_id},
            )
            raise TurnInProgressError(session.session_id)

        try:
            user_input = self.to_user_input(session, text, intent, section)
            response = self.flow_controller.handle_turn(session.state, user_input)
        finally:
            session.lock.release()

        state = session.state
        if response.error:
            logger.error(
                f"Turn failed: {response.error}",
                extra={"session_id": session.session_id, "question_index": state.current_question_index},
            )
            return RenderPayload(
                content=GENERIC_ERROR_MESSAGE,
                suggested_responses=[],
                error=GENERIC_ERROR_MESSAGE,
                session_id=session.session_id,
                question_index=state.current_question_index,
                complete=state.is_complete,
            )

        return RenderPayload(
            content=response.content or "",
            suggested_responses=list(response.suggested_responses),
            session_id=session.session_id,
            question_index=state.current_question_index,
            complete=state.is_complete,
        )

    def to_user_input(
        self,
        session: Session,
        text: str,
        intent: Optional[Intent] = None,
        section: Optional[str] = None,
    ) -> UserInput:
        """Tag the submission; an explicit intent from the widget wins over text parsing."""
        text = text or ""
        if intent is not None:
            if intent == Intent.EDIT_SECTION and not section:
                section = self.flow_controller.intent_parser.find_section(normalize_text(text))
            return UserInput(intent=intent, text=text, section=section)
        return self.flow_controller.intent_parser.parse(text, session.state.awaiting_section_choice)
