"""
Intent parser for chat widget submissions.

Untagged text from the widget is mapped onto a tagged ``UserInput`` before
it reaches the flow controller. Control phrases are matched by trimmed,
case-insensitive substring containment; everything else is an answer.
"""

import logging
import re
from typing import Optional

from models.catalog import QUESTIONS, normalize_text
from models.intent import Intent, UserInput

logger = logging.getLogger(__name__)


class IntentParser:
    """Maps raw widget text onto the flow's control intents."""

    # Canonical control phrases, compared after normalize_text()
    EDIT_SECTION_PHRASE = "i'd like to make changes to my"
    CONTINUE_PHRASE = "let's continue setting up"
    EDIT_INTEGRATION_PHRASE = "edit my integration"
    WALKTHROUGH_PHRASE = "walk me through the codebase"

    # Longest first so "business model" wins over any shorter overlap
    SECTION_NAMES = tuple(
        sorted((question.section for question in QUESTIONS), key=len, reverse=True)
    )

    def parse(self, text: str, awaiting_section_choice: bool = False) -> UserInput:
        """
        Decide the intent of a raw submission.

        Args:
            text: Text exactly as submitted by the widget
            awaiting_section_choice: True right after the edit menu was shown,
                so a bare section name selects that section

        Returns:
            UserInput with the decided intent
        """
        if not text or not text.strip():
            return UserInput(Intent.START, "")

        normalized = normalize_text(text)

        if self.EDIT_SECTION_PHRASE in normalized:
            section = self.find_section(normalized)
            logger.info(f"Intent: {Intent.EDIT_SECTION.value} (section={section})")
            return UserInput(Intent.EDIT_SECTION, text, section)

        if self.CONTINUE_PHRASE in normalized:
            logger.info(f"Intent: {Intent.CONTINUE.value}")
            return UserInput(Intent.CONTINUE, text)

        if self.EDIT_INTEGRATION_PHRASE in normalized:
            logger.info(f"Intent: {Intent.EDIT_INTEGRATION.value}")
            return UserInput(Intent.EDIT_INTEGRATION, text)

        if self.WALKTHROUGH_PHRASE in normalized:
            logger.info(f"Intent: {Intent.WALKTHROUGH.value}")
            return UserInput(Intent.WALKTHROUGH, text)

        if awaiting_section_choice:
            section = self._exact_section(normalized)
            if section:
                logger.info(f"Intent: {Intent.EDIT_SECTION.value} (menu choice {section})")
                return UserInput(Intent.EDIT_SECTION, text, section)

        return UserInput(Intent.ANSWER, text)

    def find_section(self, normalized: str) -> Optional[str]:
        """Return the first section name mentioned as a whole phrase, if any."""
        for section in self.SECTION_NAMES:
            if re.search(rf"\b{re.escape(section)}\b", normalized):
                return section
        return None

    def _exact_section(self, normalized: str) -> Optional[str]:
        stripped = normalized.rstrip(".!?")
        for section in self.SECTION_NAMES:
            if stripped == section:
                return section
        return None
