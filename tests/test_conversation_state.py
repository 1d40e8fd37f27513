"""Unit tests for ConversationState."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from models.catalog import QUESTIONS
from models.conversation import Classification, ConversationState, Role, Turn


class TestConversationState:
    """Test suite for ConversationState."""

    @pytest.fixture
    def state(self):
        """Create a fresh state with a system turn."""
        return ConversationState.start("system instructions")

    def test_start_holds_only_system_turn(self, state):
        """Test a new state has the system turn and cursor at 0."""
        assert state.history == [Turn(Role.SYSTEM, "system instructions")]
        assert state.current_question_index == 0
        assert state.section_override is None
        assert not state.is_complete

    def test_append_turns(self, state):
        """Test user and assistant turns are appended in order."""
        state.append_user("SaaS platform")
        state.append_assistant("Great choice!")

        assert [t.role for t in state.history] == [Role.SYSTEM, Role.USER, Role.ASSISTANT]
        assert state.history[-1].to_message() == {"role": "assistant", "content": "Great choice!"}

    def test_append_does_not_advance(self, state):
        """Test appending a user turn leaves the cursor alone."""
        state.append_user("SaaS platform")
        assert state.current_question_index == 0

    def test_classify_exact_option_is_decisive(self, state):
        """Test exact options are decisive."""
        assert state.classify_input("SaaS platform") == Classification.DECISIVE
        assert state.classify_input("Marketplace") == Classification.DECISIVE

    def test_classify_is_case_insensitive_and_trimmed(self, state):
        """Test option matching ignores case and surrounding whitespace."""
        assert state.classify_input("  saas PLATFORM ") == Classification.DECISIVE

    @pytest.mark.parametrize("text", [
        "I'm not sure",
        "i’m not sure",
        "What's the difference?",
        "SaaS",
        "SaaS platform please",
    ])
    def test_classify_other_input_is_informational(self, state, text):
        """Test anything that is not an exact decisive option is informational."""
        assert state.classify_input(text) == Classification.INFORMATIONAL

    def test_classify_benefits_question_is_informational(self, state):
        """Test the 'What are the benefits?' chip never advances the fees question."""
        assert state.classify_input("What are the benefits?", current_index=1) == Classification.INFORMATIONAL
        assert state.classify_input("You pay fees", current_index=1) == Classification.DECISIVE

    def test_classify_uses_given_index(self, state):
        """Test classification against an explicit question index."""
        assert state.classify_input("Use Checkout", current_index=3) == Classification.DECISIVE
        assert state.classify_input("Use Checkout") == Classification.INFORMATIONAL

    def test_classify_in_terminal_state(self, state):
        """Test everything is informational once all questions are answered."""
        state.current_question_index = 5
        assert state.classify_input("Stripe Dashboard") == Classification.INFORMATIONAL

    def test_matching_option_returns_canonical_text(self, state):
        """Test the canonical option is returned for loosely typed input."""
        assert state.matching_option("marketplace ") == "Marketplace"
        assert state.matching_option("nope") is None

    def test_advance_records_answer(self, state):
        """Test advance moves the cursor and records the answer."""
        state.advance("Marketplace")
        assert state.current_question_index == 1
        assert state.answers == {1: "Marketplace"}

    def test_advance_caps_at_terminal(self, state):
        """Test the cursor never passes the terminal state."""
        for question in QUESTIONS:
            state.advance(question.options[0])
        assert state.current_question_index == 5
        assert state.is_complete

        state.advance("extra")
        assert state.current_question_index == 5
        assert len(state.answers) == 5

    def test_jump_to_rewinds_and_discards_later_answers(self, state):
        """Test jumping to a section drops its answer and every later one."""
        for question in QUESTIONS:
            state.advance(question.options[0])
        state.append_user("SaaS platform")
        state.append_assistant("...")

        question = state.jump_to("onboarding")

        assert question.id == 3
        assert state.section_override == question
        assert state.current_question_index == 2
        assert set(state.answers) == {1, 2}
        assert len(state.history) == 2
        assert state.history[0].role == Role.SYSTEM
        assert state.history[1] == Turn(Role.USER, "I'd like to make changes to my onboarding setup.")

    def test_jump_to_unknown_section(self, state):
        """Test jumping to an unknown section changes nothing."""
        state.advance("SaaS platform")
        assert state.jump_to("payouts") is None
        assert state.current_question_index == 1
        assert state.answers == {1: "SaaS platform"}

    def test_advance_clears_section_override(self, state):
        """Test answering the revisited question clears the override."""
        state.jump_to("business model")
        state.advance("Marketplace")
        assert state.section_override is None

    def test_decisive_answer_count_is_contiguous(self, state):
        """Test only answers in catalog order are counted."""
        state.answers = {1: "SaaS platform", 2: "You pay fees", 4: "Use Checkout"}
        assert state.decisive_answer_count() == 2

    def test_summary(self, state):
        """Test the summary lists recorded choices in order."""
        state.advance("Marketplace")
        state.advance("Seller pays fees")
        assert state.summary() == "- Business model: Marketplace\n- Fees: Seller pays fees"

    def test_turns_are_immutable(self):
        """Test turns cannot be changed after creation."""
        turn = Turn(Role.USER, "hello")
        with pytest.raises(Exception):
            turn.content = "changed"
