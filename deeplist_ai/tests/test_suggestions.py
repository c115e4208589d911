from deeplist_ai.api.suggestions import (
    fallback_suggestions,
    parse_embedded_json_suggestions,
    parse_json_suggestions,
    parse_line_suggestions,
    parse_suggestions,
)


def test_direct_json_is_capped_at_three():
    content = '{"suggestions": ["How to start?", "Pricing?", "Examples?", "Extra one"]}'
    assert parse_suggestions(content) == ["How to start?", "Pricing?", "Examples?"]


def test_json_wrapped_in_prose_and_fence():
    content = 'Sure! Here you go:\n```json\n{"suggestions": ["Try a recipe", "Swap ingredients"]}\n```'
    assert parse_json_suggestions(content) is None
    assert parse_suggestions(content) == ["Try a recipe", "Swap ingredients"]


def test_json_skips_non_string_and_blank_items():
    content = '{"suggestions": ["  A  ", "", 3, null, "B"]}'
    assert parse_json_suggestions(content) == ["A", "B"]


def test_line_heuristics():
    content = "\n".join([
        "Here are some ideas:",
        "1. How do I start?",
        '2. "What about pricing?",',
        "- Show me examples",
        "* one more",
    ])
    assert parse_suggestions(content) == ["Here are some ideas:", "How do I start?", "What about pricing?"]


def test_line_heuristics_skip_long_lines_and_braces():
    content = "\n".join([
        "x" * 50,
        '{"broken": ',
        "- Short one",
        "",
        "'Quoted'",
    ])
    assert parse_line_suggestions(content) == ["Short one", "Quoted"]


def test_broken_json_falls_through_to_lines():
    content = '{"suggestions": ["A", "B"'
    assert parse_embedded_json_suggestions(content) is None
    assert parse_suggestions(content) == []


def test_empty_results():
    assert parse_suggestions("") == []
    assert parse_suggestions('{"suggestions": []}') == []
    assert parse_suggestions("   \n  \n") == []


def test_results_never_exceed_three():
    content = "\n".join(f"- idea {i}" for i in range(10))
    assert len(parse_suggestions(content)) == 3


def test_fallback_with_tool_name():
    assert fallback_suggestions("Recipe Helper") == [
        "How does Recipe Helper work?",
        "What can I do with Recipe Helper?",
        "Show me examples",
    ]


def test_generic_fallback():
    expected = ["Tell me more", "How do I get started?", "What are the main features?"]
    assert fallback_suggestions("") == expected
    assert fallback_suggestions("   ") == expected
