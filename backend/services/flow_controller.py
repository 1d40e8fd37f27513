"""
Flow controller for the guided onboarding conversation.

Each user turn becomes exactly one of: the opening message, a canned
control reply (edit a section, continue, the terminal menu), or a
completion call whose transition was already decided locally. Local
classification owns the cursor; the completion service only phrases the
reply.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

from models.catalog import (
    EDIT_MENU_OPTIONS,
    OPENING_MESSAGE,
    TERMINAL_OPTIONS,
    Question,
    options_for,
    question_at,
)
from models.conversation import Classification, ConversationState, Role, Turn, format_summary
from models.intent import Intent, UserInput
from services.completion_adapter import MAX_SUGGESTIONS, Completion, CompletionAdapter, ServiceError
from services.flow_prompts import (
    FlowPolicy,
    advance_directive,
    instructions_for,
    reask_directive,
    summary_directive,
    terminal_directive,
)
from services.intent_parser import IntentParser

logger = logging.getLogger(__name__)


@dataclass
class FlowResponse:
    """
    Outgoing message for one turn.

    A non-null ``error`` means the turn failed, whatever ``content`` holds.
    """
    content: Optional[str]
    suggested_responses: List[str] = field(default_factory=list)
    error: Optional[str] = None


class FlowController:
    """Decides the next transition of a ConversationState for each user turn."""

    EDIT_MENU_TEXT = "I'd be happy to help you edit your integration setup. What would you like to modify?"
    UNKNOWN_SECTION_TEXT = (
        "I understand you'd like to make changes. Could you clarify which section you'd like to modify?"
    )
    REVIEW_TEXT = (
        "It looks like we've covered all the main setup questions! Would you like to review any "
        "specific section or do you have other questions about your Stripe integration?"
    )
    WALKTHROUGH_TEXT = (
        "Let me walk you through the codebase! I'm now showing you the App.jsx file, which is the "
        "main component that brings everything together. This React component imports Stripe's "
        "loadStripe function and sets up the payment flow. You can see how we initialize Stripe with "
        "your publishable key, create the checkout session, and handle the payment elements. The "
        "component structure shows a clean separation between the payment form and the backend "
        "integration."
    )

    # Lead-ins used when resuming at a given question index
    CONTINUE_LEADS = {
        0: "Let's pick up where we left off.",
        1: "Great! Let's continue.",
        2: "Perfect! Let's move on.",
        3: "Excellent! Now let's talk about payments.",
        4: "Almost done! Finally,",
    }

    def __init__(
        self,
        completion_adapter: CompletionAdapter,
        policy: FlowPolicy = FlowPolicy.STRICT_WITH_EXPLANATIONS,
        intent_parser: Optional[IntentParser] = None,
    ):
        """
        Initialize the controller.

        Args:
            completion_adapter: Adapter used for turns that are not handled locally
            policy: Flow variant deciding prompt wording and suggestion handling
            intent_parser: Parser for untagged text (a default one is created if omitted)
        """
        self.completion_adapter = completion_adapter
        self.policy = FlowPolicy(policy)
        self.intent_parser = intent_parser or IntentParser()
        self._handlers: Dict[Intent, Callable[[ConversationState, UserInput], FlowResponse]] = {
            Intent.EDIT_SECTION: self._handle_edit_section,
            Intent.CONTINUE: self._handle_continue,
            Intent.EDIT_INTEGRATION: self._handle_edit_integration,
            Intent.WALKTHROUGH: self._handle_walkthrough,
            Intent.ANSWER: self._handle_answer,
        }
        logger.info(f"FlowController initialized with policy: {self.policy.value}")

    @property
    def instructions(self) -> str:
        return instructions_for(self.policy)

    @property
    def enforces_options(self) -> bool:
        """Strict policies always offer the catalog options, never the model's."""
        return self.policy != FlowPolicy.OPEN_ENDED_ADVISOR

    def new_state(self) -> ConversationState:
        """Create the state for a new session."""
        return ConversationState.start(self.instructions)

    def opening_response(self) -> FlowResponse:
        return FlowResponse(content=OPENING_MESSAGE, suggested_responses=options_for(0))

    def handle_turn(self, state: ConversationState, user_input: Union[str, UserInput]) -> FlowResponse:
        """
        Process one user turn and produce the reply.

        Args:
            state: Session state, updated in place
            user_input: Raw widget text or an already tagged UserInput

        Returns:
            FlowResponse; failures are reported in its ``error`` field, never raised
        """
        if isinstance(user_input, str):
            user_input = self.intent_parser.parse(user_input, state.awaiting_section_choice)

        if user_input.intent == Intent.START or (
            user_input.intent == Intent.ANSWER and not user_input.text.strip()
        ):
            return self.opening_response()

        logger.info(
            f"Handling turn: intent={user_input.intent.value}, index={state.current_question_index}",
            extra={"intent": user_input.intent.value, "question_index": state.current_question_index},
        )
        return self._handlers[user_input.intent](state, user_input)

    # Control intents: deterministic, no completion call

    def _handle_edit_section(self, state: ConversationState, user_input: UserInput) -> FlowResponse:
        question = state.jump_to(user_input.section) if user_input.section else None
        if question is None:
            state.awaiting_section_choice = True
            return FlowResponse(content=self.UNKNOWN_SECTION_TEXT, suggested_responses=list(EDIT_MENU_OPTIONS))

        content = f"Let's revisit your {question.section} setup. {question.prompt_text}"
        state.append_assistant(content)
        return FlowResponse(content=content, suggested_responses=list(question.options))

    def _handle_continue(self, state: ConversationState, user_input: UserInput) -> FlowResponse:
        state.current_question_index = state.decisive_answer_count()
        state.section_override = None
        state.awaiting_section_choice = False

        question = state.current_question
        if question is None:
            return FlowResponse(content=self.REVIEW_TEXT, suggested_responses=list(TERMINAL_OPTIONS))

        return FlowResponse(
            content=self._with_lead(self.CONTINUE_LEADS[state.current_question_index], question),
            suggested_responses=list(question.options),
        )

    def _handle_edit_integration(self, state: ConversationState, user_input: UserInput) -> FlowResponse:
        state.awaiting_section_choice = True
        return FlowResponse(content=self.EDIT_MENU_TEXT, suggested_responses=list(EDIT_MENU_OPTIONS))

    def _handle_walkthrough(self, state: ConversationState, user_input: UserInput) -> FlowResponse:
        state.awaiting_section_choice = False
        return FlowResponse(content=self.WALKTHROUGH_TEXT, suggested_responses=[])

    @staticmethod
    def _with_lead(lead: str, question: Question) -> str:
        prompt = question.prompt_text
        if lead.endswith(","):
            return f"{lead} {prompt[0].lower()}{prompt[1:]}"
        return f"{lead} {prompt}"

    # Answers: classified locally, phrased by the completion service

    def _handle_answer(self, state: ConversationState, user_input: UserInput) -> FlowResponse:
        text = user_input.text
        state.awaiting_section_choice = False
        question = state.current_question

        answer = None
        if question is None:
            directive = terminal_directive()
        elif state.classify_input(text) == Classification.DECISIVE:
            answer = state.matching_option(text)
            next_question = question_at(state.current_question_index + 1)
            if next_question is not None:
                directive = advance_directive(
                    question, answer, next_question, revisited=state.section_override is not None
                )
            else:
                directive = summary_directive(format_summary({**state.answers, question.id: answer}))
        else:
            directive = reask_directive(question, explain=self.policy != FlowPolicy.STRICT_SIMPLE)

        # The user turn joins the history only once the completion succeeds
        pending = state.history + [Turn(Role.USER, text)]

        try:
            completion = self.completion_adapter.complete(pending, directive)
        except ServiceError as e:
            logger.error(
                f"Completion failed, turn not applied: {e.error.code}",
                extra={"error_code": e.error.code, "question_index": state.current_question_index},
            )
            return FlowResponse(content=None, suggested_responses=[], error=e.error.message)
        except Exception as e:
            logger.error(f"Unexpected completion failure: {e}", exc_info=True)
            return FlowResponse(content=None, suggested_responses=[], error=str(e))

        state.append_user(text)
        state.append_assistant(completion.raw or completion.content)
        if answer is not None:
            state.advance(answer)

        return FlowResponse(
            content=completion.content,
            suggested_responses=self._suggestions_for(state, completion),
        )

    def _suggestions_for(self, state: ConversationState, completion: Completion) -> List[str]:
        # An unparsed reply is shown as plain text without chips
        if not completion.parsed:
            return []
        if not self.enforces_options:
            return list(completion.suggested_responses)[:MAX_SUGGESTIONS]
        if state.is_complete:
            return list(TERMINAL_OPTIONS)
        return options_for(state.current_question_index)
