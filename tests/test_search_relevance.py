import pytest

from partnerhub.search.relevance import calculate_relevance, score_field


@pytest.mark.parametrize(
    "field,expected",
    [
        ("website redesign", 100),
        ("website redesign phase 2", 80),
        ("the website redesign", 60),
        ("website redesigner", 80),
        ("new website redesigner", 40),
        ("mobile app", 0),
    ],
)
def test_match_tiers(field, expected):
    assert score_field("website redesign", field) == expected


def test_empty_field_scores_nothing():
    assert score_field("alpha", None) == 0
    assert score_field("alpha", "") == 0


def test_case_insensitive():
    assert calculate_relevance("ALPHA", "alpha") == 100
    assert calculate_relevance("alpha", "Alpha Project") == 80


def test_scores_are_summed_across_fields_without_cap():
    assert calculate_relevance("alpha", "Alpha", "Alpha project kickoff") == 180
    assert calculate_relevance("alpha", "Alpha", "alpha", "ALPHA") == 300


def test_missing_fields_are_skipped():
    assert calculate_relevance("alpha", "Alpha", None) == 100


class TestRegexCharactersAreLiteral:
    def test_plus_signs(self):
        assert calculate_relevance("C++", "C++") == 100
        assert calculate_relevance("C++", "c++ migration") == 80
        # No word boundary after "++" when a space follows
        assert calculate_relevance("C++", "Learn C++ today") == 40

    def test_template_placeholder(self):
        assert calculate_relevance("${x}", "${x}") == 100
        assert calculate_relevance("${x}", "cost is ${x} yen") == 40

    def test_dot_does_not_match_any_character(self):
        assert calculate_relevance("a.b", "axb") == 0
        assert calculate_relevance("a.b", "see a.b here") == 60

    @pytest.mark.parametrize("query", ["(", "[a-", "*", "\\", "?"])
    def test_unbalanced_patterns_do_not_raise(self, query):
        assert calculate_relevance(query, "plain text") == 0


def test_cjk_text_uses_substring_tier():
    assert calculate_relevance("東京", "東京") == 100
    assert calculate_relevance("東京", "東京支社") == 80
    assert calculate_relevance("東京", "新東京支社") == 40
