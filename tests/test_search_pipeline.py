import pytest

from me_api.pipelines.search import (
    EntityType,
    SearchResult,
    SearchValidationError,
    like_pattern,
    normalize_query,
    parse_entity_type,
    proficiency_label,
    rank_results,
    relevance_key,
)


def hit(title, kind="project", id=1):
    return SearchResult(type=kind, title=title, description=None, category=None, id=id)


def test_normalize_query_trims():
    assert normalize_query("  fast api \n") == "fast api"


@pytest.mark.parametrize("raw", [None, "", " ", "x", "  y  "])
def test_normalize_query_rejects_short_input(raw):
    with pytest.raises(SearchValidationError) as excinfo:
        normalize_query(raw)
    assert excinfo.value.error == "Invalid search query"


def test_normalize_query_custom_minimum():
    assert normalize_query("abc", min_length=3) == "abc"
    with pytest.raises(SearchValidationError):
        normalize_query("ab", min_length=3)


def test_normalize_query_zero_minimum_is_respected():
    assert normalize_query("", min_length=0) == ""
    assert normalize_query(" x ", min_length=1) == "x"


def test_parse_entity_type():
    assert parse_entity_type(None) is None
    assert parse_entity_type("") is None
    assert parse_entity_type("work") is EntityType.WORK


@pytest.mark.parametrize("value", ["bogus", "Skill", "projects"])
def test_parse_entity_type_rejects_unknown(value):
    with pytest.raises(SearchValidationError) as excinfo:
        parse_entity_type(value)
    assert excinfo.value.error == "Invalid type filter"
    assert excinfo.value.message == "Type must be one of: profile, skill, project, work"


def test_like_pattern():
    assert like_pattern("react") == "%react%"


@pytest.mark.parametrize(
    "proficiency, label",
    [
        (5, "Expert level"),
        (4, "Advanced level"),
        (3, "Intermediate level"),
        (2, "Beginner level"),
        (1, "Basic level"),
        (None, "Basic level"),
    ],
)
def test_proficiency_label(proficiency, label):
    assert proficiency_label(proficiency) == label


def test_exact_match_beats_earlier_occurrence():
    ranked = rank_results([hit("React Native", id=1), hit("react", id=2)], "React")
    assert [r.id for r in ranked] == [2, 1]


def test_earlier_occurrence_ranks_higher():
    results = [hit("Learning React", id=1), hit("React Hooks", id=2), hit("My React App", id=3)]
    ranked = rank_results(results, "react")
    assert [r.id for r in ranked] == [2, 3, 1]


def test_titles_without_the_query_rank_ahead_of_partial_matches():
    results = [hit("React Hooks", id=1), hit("Dashboard", id=2), hit("react", id=3)]
    ranked = rank_results(results, "react")
    assert [r.id for r in ranked] == [3, 2, 1]


def test_ties_keep_merge_order():
    results = [hit("React", kind="skill", id=7), hit("React", kind="project", id=3)]
    ranked = rank_results(results, "react")
    assert [(r.type, r.id) for r in ranked] == [("skill", 7), ("project", 3)]


def test_non_string_title_ranks_as_empty():
    assert relevance_key(hit(None), "react") == relevance_key(hit(""), "react")
    ranked = rank_results([hit("reactor", id=1), hit(None, id=2)], "react")
    assert [r.id for r in ranked] == [2, 1]


def test_to_dict_shape():
    assert hit("React", kind="skill", id=4).to_dict() == {
        "type": "skill",
        "title": "React",
        "description": None,
        "category": None,
        "id": 4,
    }
