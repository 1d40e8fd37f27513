"""Unit tests for the question catalog."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from models.catalog import (
    EDIT_MENU_OPTIONS,
    OPENING_MESSAGE,
    QUESTIONS,
    TERMINAL_OPTIONS,
    normalize_text,
    options_for,
    question_at,
    question_for_section,
)


class TestQuestionCatalog:
    """Test suite for the static question catalog."""

    def test_five_questions_in_order(self):
        """Test that the catalog holds five questions with ordinals 1-5."""
        assert [q.id for q in QUESTIONS] == [1, 2, 3, 4, 5]
        assert [q.section for q in QUESTIONS] == [
            "business model", "fees", "onboarding", "checkout", "dashboard"
        ]

    def test_each_question_has_three_options(self):
        """Test that every question offers exactly three suggested responses."""
        for question in QUESTIONS:
            assert len(question.options) == 3

    def test_question_at_in_range(self):
        """Test lookup by 0-based cursor."""
        assert question_at(0).prompt_text == "What is your business model: a SaaS platform or a Marketplace?"
        assert question_at(4).section == "dashboard"

    @pytest.mark.parametrize("index", [-1, 5, 99])
    def test_question_at_out_of_range(self, index):
        """Test that an out-of-range index yields None."""
        assert question_at(index) is None

    def test_options_for(self):
        """Test option lookup and the empty list out of range."""
        assert options_for(1) == ["Seller pays fees", "You pay fees", "What are the benefits?"]
        assert options_for(5) == []

    def test_question_for_section_case_insensitive(self):
        """Test section lookup ignores case and surrounding whitespace."""
        assert question_for_section("Onboarding").id == 3
        assert question_for_section("  BUSINESS MODEL ").id == 1
        assert question_for_section("payouts") is None
        assert question_for_section("") is None

    def test_opening_message_ends_with_first_question(self):
        """Test the opening message asks the first question."""
        assert OPENING_MESSAGE.startswith("Thank you for providing that information about your business.")
        assert OPENING_MESSAGE.endswith(QUESTIONS[0].prompt_text)

    def test_menus(self):
        """Test the terminal and edit menus."""
        assert TERMINAL_OPTIONS == ["Edit my integration", "Walk me through the codebase"]
        assert EDIT_MENU_OPTIONS == ["Business model", "Onboarding", "Checkout", "Dashboard"]

    def test_normalize_text(self):
        """Test trimming, case folding, whitespace collapsing and apostrophes."""
        assert normalize_text("  I’m   NOT sure ") == "i'm not sure"
        assert normalize_text("") == ""
