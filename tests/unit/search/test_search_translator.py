"""Unit tests for the default query translator."""

import pytest

from catalog_search.domain.search import SearchQuery
from catalog_search.search.errors import UnknownFilterFieldError
from catalog_search.search.index import MatchMode
from catalog_search.search.translator import (
    DEFAULT_PAGE_SIZE,
    DefaultQueryTranslator,
    FilterClause,
    Presence,
)


FIELDS = {
    "software-catalog": frozenset({"title", "text", "location", "kind"}),
    "techdocs": frozenset({"title", "text", "location", "path"}),
}


@pytest.fixture
def translator():
    return DefaultQueryTranslator()


@pytest.mark.unit
class TestMatchClauses:
    def test_each_token_gets_exact_prefix_and_fuzzy(self, translator):
        plan = translator(SearchQuery(term="testTitle"), FIELDS)

        assert [(c.term, c.mode, c.boost) for c in plan.match_clauses] == [
            ("testtitle", MatchMode.EXACT, 100.0),
            ("testtitle", MatchMode.PREFIX, 10.0),
            ("testtitle", MatchMode.FUZZY, 1.0),
        ]

    def test_only_exact_clause_uses_pipeline(self, translator):
        plan = translator(SearchQuery(term="searching"), FIELDS)

        assert [c.use_pipeline for c in plan.match_clauses] == [True, False, False]

    def test_fuzzy_edit_distance(self, translator):
        plan = translator(SearchQuery(term="docs"), FIELDS)

        fuzzy = [c for c in plan.match_clauses if c.mode is MatchMode.FUZZY]
        assert [c.edit_distance for c in fuzzy] == [2]

    def test_custom_edit_distance(self):
        plan = DefaultQueryTranslator(fuzzy_edit_distance=1)(SearchQuery(term="docs"), FIELDS)

        assert plan.match_clauses[-1].edit_distance == 1

    def test_multiple_tokens(self, translator):
        plan = translator(SearchQuery(term="Hello World."), FIELDS)

        assert len(plan.match_clauses) == 6
        assert {c.term for c in plan.match_clauses} == {"hello", "world."}

    def test_empty_term_has_no_match_clauses(self, translator):
        assert translator(SearchQuery(term=""), FIELDS).match_clauses == ()
        assert translator(SearchQuery(term="   "), FIELDS).match_clauses == ()


@pytest.mark.unit
class TestFilterClauses:
    def test_filters_become_required_clauses(self, translator):
        plan = translator(SearchQuery(filters={"location": "test:location2"}), FIELDS)

        assert plan.filter_clauses == (FilterClause("location", "test:location2", Presence.REQUIRED),)

    def test_field_present_in_one_index_is_accepted(self, translator):
        plan = translator(SearchQuery(filters={"path": "/docs"}), FIELDS)

        assert [c.field for c in plan.filter_clauses] == ["path"]

    def test_unknown_field_raises(self, translator):
        with pytest.raises(UnknownFilterFieldError) as excinfo:
            translator(SearchQuery(filters={"colour": "red"}), FIELDS)

        assert excinfo.value.field == "colour"
        assert excinfo.value.types == ("software-catalog", "techdocs")

    def test_nothing_in_scope_skips_validation(self, translator):
        plan = translator(SearchQuery(filters={"colour": "red"}), {})

        assert [c.field for c in plan.filter_clauses] == ["colour"]


@pytest.mark.unit
class TestPlanScope:
    def test_types_and_page_size(self, translator):
        plan = translator(SearchQuery(types=["techdocs"]), FIELDS)

        assert plan.document_types == ("techdocs",)
        assert plan.page_size == DEFAULT_PAGE_SIZE == 25

    def test_no_types_means_all(self, translator):
        assert translator(SearchQuery(), FIELDS).document_types is None
        assert translator(SearchQuery(types=[]), FIELDS).document_types is None

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError, match="page_size"):
            DefaultQueryTranslator(page_size=0)
