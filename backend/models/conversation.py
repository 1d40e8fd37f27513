"""Conversation data models."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from models.catalog import (
    INFORMATIONAL_OPTIONS,
    QUESTIONS,
    TOTAL_QUESTIONS,
    Question,
    normalize_text,
    question_at,
    question_for_section,
)

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Author of a turn, as understood by the completion service."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Classification(str, Enum):
    """How a free-text answer relates to the question awaiting an answer."""
    DECISIVE = "decisive"
    INFORMATIONAL = "informational"


@dataclass(frozen=True)
class Turn:
    """Represents a single turn in a conversation."""
    role: Role
    content: str

    def to_message(self) -> Dict[str, str]:
        """Chat-completion message form of this turn."""
        return {"role": self.role.value, "content": self.content}


@dataclass
class ConversationState:
    """
    Progress of one onboarding session.

    ``current_question_index`` counts decisive answers, so the question
    awaiting an answer is ``QUESTIONS[current_question_index]`` and
    ``TOTAL_QUESTIONS`` marks the terminal summary state. Clarification
    turns never move it.
    """
    history: List[Turn] = field(default_factory=list)
    current_question_index: int = 0
    section_override: Optional[Question] = None
    answers: Dict[int, str] = field(default_factory=dict)  # question id -> option
    awaiting_section_choice: bool = False

    @classmethod
    def start(cls, system_instructions: str) -> "ConversationState":
        """Create a fresh state holding only the system turn."""
        return cls(history=[Turn(Role.SYSTEM, system_instructions)])

    @property
    def is_complete(self) -> bool:
        return self.current_question_index >= TOTAL_QUESTIONS

    @property
    def current_question(self) -> Optional[Question]:
        return question_at(self.current_question_index)

    def append_user(self, text: str) -> None:
        self.history.append(Turn(Role.USER, text))

    def append_assistant(self, text: str) -> None:
        self.history.append(Turn(Role.ASSISTANT, text))

    def classify_input(self, text: str, current_index: Optional[int] = None) -> Classification:
        """
        Decide whether ``text`` answers the question at ``current_index``.

        Only an exact option (trimmed, case-insensitive) is decisive. Options
        that ask for help, such as "I'm not sure", stay informational.
        """
        index = self.current_question_index if current_index is None else current_index
        question = question_at(index)
        if question is None:
            return Classification.INFORMATIONAL

        normalized = normalize_text(text)
        if normalized in INFORMATIONAL_OPTIONS:
            return Classification.INFORMATIONAL

        for option in question.options:
            if normalize_text(option) == normalized:
                return Classification.DECISIVE
        return Classification.INFORMATIONAL

    def matching_option(self, text: str) -> Optional[str]:
        """Return the canonical option string that ``text`` selects, if any."""
        question = self.current_question
        if question is None:
            return None
        normalized = normalize_text(text)
        for option in question.options:
            if normalize_text(option) == normalized:
                return option
        return None

    def advance(self, answer: Optional[str] = None) -> None:
        """Move past the current question, recording ``answer`` for it."""
        question = self.current_question
        if question is None:
            return
        if answer is not None:
            self.answers[question.id] = answer
        self.current_question_index = min(self.current_question_index + 1, TOTAL_QUESTIONS)
        self.section_override = None
        logger.info(
            f"Advanced to question index {self.current_question_index}",
            extra={"question_index": self.current_question_index},
        )

    def jump_to(self, section_name: str) -> Optional[Question]:
        """
        Rewind to the question for ``section_name``.

        Answers for that question and every later one are dropped, and the
        history is cut back to the system turn plus a re-entry turn.
        """
        question = question_for_section(section_name)
        if question is None:
            return None

        self.section_override = question
        self.current_question_index = question.id - 1
        self.answers = {qid: answer for qid, answer in self.answers.items() if qid < question.id}
        self.awaiting_section_choice = False

        system_turns = self.history[:1]
        self.history = system_turns + [
            Turn(Role.USER, f"I'd like to make changes to my {question.section} setup.")
        ]
        logger.info(
            f"Jumped to section '{question.section}'",
            extra={"question_index": self.current_question_index},
        )
        return question

    def decisive_answer_count(self) -> int:
        """Number of questions answered decisively, in catalog order."""
        count = 0
        for question in QUESTIONS:
            if question.id not in self.answers:
                break
            count += 1
        return count

    def summary(self) -> str:
        """Readable list of recorded choices."""
        return format_summary(self.answers)


def format_summary(answers: Dict[int, str]) -> str:
    """One line per answered question, in catalog order."""
    lines = []
    for question in QUESTIONS:
        answer = answers.get(question.id)
        if answer:
            lines.append(f"- {question.section.capitalize()}: {answer}")
    return "\n".join(lines)
