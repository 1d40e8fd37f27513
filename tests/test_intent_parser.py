"""Unit tests for IntentParser."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from models.intent import Intent
from services.intent_parser import IntentParser


class TestIntentParser:
    """Test suite for IntentParser."""

    @pytest.fixture
    def parser(self):
        """Create an IntentParser instance for testing."""
        return IntentParser()

    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    def test_empty_is_start(self, parser, text):
        """Test empty submissions start the conversation."""
        assert parser.parse(text).intent == Intent.START

    def test_edit_section_request(self, parser):
        """Test an edit request names its section."""
        result = parser.parse("I'd like to make changes to my onboarding setup")
        assert result.intent == Intent.EDIT_SECTION
        assert result.section == "onboarding"

    def test_edit_section_multiword(self, parser):
        """Test the multi-word business model section is found."""
        result = parser.parse("I'd like to make changes to my Business Model")
        assert result.section == "business model"

    def test_edit_section_without_known_section(self, parser):
        """Test an edit request with no recognizable section keeps section empty."""
        result = parser.parse("I'd like to make changes to my payouts")
        assert result.intent == Intent.EDIT_SECTION
        assert result.section is None

    def test_control_phrases_are_case_insensitive(self, parser):
        """Test control phrases match regardless of case and curly apostrophes."""
        assert parser.parse("i’d LIKE to make changes to my checkout").intent == Intent.EDIT_SECTION
        assert parser.parse("let's CONTINUE setting up my integration").intent == Intent.CONTINUE
        assert parser.parse("EDIT MY INTEGRATION").intent == Intent.EDIT_INTEGRATION
        assert parser.parse("walk me through the codebase please").intent == Intent.WALKTHROUGH

    def test_terminal_menu_chips(self, parser):
        """Test the exact terminal menu chips."""
        assert parser.parse("Edit my integration").intent == Intent.EDIT_INTEGRATION
        assert parser.parse("Walk me through the codebase").intent == Intent.WALKTHROUGH

    @pytest.mark.parametrize("text", ["SaaS platform", "I'm not sure", "What does Connect cost?"])
    def test_other_text_is_answer(self, parser, text):
        """Test anything else is passed through as an answer."""
        result = parser.parse(text)
        assert result.intent == Intent.ANSWER
        assert result.text == text

    def test_bare_section_only_after_edit_menu(self, parser):
        """Test a bare section name selects it only while the edit menu is open."""
        assert parser.parse("Onboarding").intent == Intent.ANSWER

        result = parser.parse("Onboarding", awaiting_section_choice=True)
        assert result.intent == Intent.EDIT_SECTION
        assert result.section == "onboarding"

    def test_section_word_inside_answer_is_not_a_choice(self, parser):
        """Test an option that mentions a section is not mistaken for a menu choice."""
        result = parser.parse("Stripe Dashboard", awaiting_section_choice=True)
        assert result.intent == Intent.ANSWER
