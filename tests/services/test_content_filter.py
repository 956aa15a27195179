# tests/services/test_content_filter.py
"""Tests for the static phrase filter."""

import pytest

from nurture_forum.services.content_filter import BLOCKED_REASON, check_content


@pytest.mark.parametrize(
    "text",
    [
        "Has anyone tried Chlorine Dioxide?",
        "My cousin says VACCINES CAUSE AUTISM",
        "ye bacha kabhi theek nahi hoga",
        "Dua se autism chala jayega, doctor ki zaroorat nahi",
    ],
)
def test_blocked_phrases(text) -> None:
    result = check_content(text)
    assert result.blocked is True
    assert result.reason == BLOCKED_REASON


@pytest.mark.parametrize(
    "text",
    [
        "Our speech therapist suggested picture cards",
        "Which school in Lahore has a good sensory room?",
        "",
        None,
    ],
)
def test_allowed_text(text) -> None:
    result = check_content(text)
    assert result.blocked is False
    assert result.reason is None
