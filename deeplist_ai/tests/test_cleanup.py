import pytest

from deeplist_ai.api.cleanup import clean_generated_text, lead_in_phrases, strip_wrapping_quotes


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("**Option 1:** Plan meals for the week in minutes.", "Plan meals for the week in minutes."),
        ("option 2: Plan meals fast.", "Plan meals fast."),
        ("Plan **weekly** meals.", "Plan weekly meals."),
        ('"Plan meals fast."', "Plan meals fast."),
        ("Here is the description: Plan meals fast.", "Plan meals fast."),
        ("  Plan meals fast.  ", "Plan meals fast."),
    ],
)
def test_clean_description(raw, expected):
    assert clean_generated_text(raw, "description") == expected


@pytest.mark.parametrize(
    "raw",
    [
        "Here is the welcome message: Hi! Ask me anything about recipes.",
        "Here's the welcome message: Hi! Ask me anything about recipes.",
        "Okay, here is the welcome message: Hi! Ask me anything about recipes.",
        "okay, here's the welcome message:\n\nHi! Ask me anything about recipes.",
        "Welcome message: Hi! Ask me anything about recipes.",
        'The welcome message: "Hi! Ask me anything about recipes."',
    ],
)
def test_clean_welcome_message(raw):
    assert clean_generated_text(raw, "welcome message") == "Hi! Ask me anything about recipes."


def test_clean_name():
    assert clean_generated_text('"Meal Planner"', "name") == "Meal Planner"
    assert clean_generated_text("Name: Meal Planner", "name") == "Meal Planner"


def test_combined_prefixes():
    raw = "**Option 1:** **Here is the description:** Plan meals fast."
    assert clean_generated_text(raw, "description") == "Plan meals fast."


def test_cleanup_can_produce_empty_text():
    assert clean_generated_text("**Option 1:**", "description") == ""
    assert clean_generated_text('""', "name") == ""


def test_lead_in_phrases():
    phrases = lead_in_phrases("welcome message")
    assert "Here is the welcome message:" in phrases
    assert "Welcome message:" in phrases
    assert "The welcome message:" in phrases


def test_strip_wrapping_quotes_requires_matching_pair():
    assert strip_wrapping_quotes("'single'") == "single"
    assert strip_wrapping_quotes('"unbalanced') == '"unbalanced'
    assert strip_wrapping_quotes('"') == '"'
