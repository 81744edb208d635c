"""Unit tests for building and querying a single type index."""

import pytest

from catalog_search.search.analyzers import get_analyzer
from catalog_search.search.errors import InvalidDocumentError
from catalog_search.search.index import MatchMode, Posting, build_type_index, normalize_keyword


@pytest.fixture
def analyzer():
    return get_analyzer("default")


@pytest.fixture
def index(analyzer):
    documents = [
        {"title": "Searching catalogs", "text": "Hello World.", "location": "a", "kind": "Component"},
        {"title": "testTitle", "text": "testText", "location": "b", "tags": ["alpha", "Beta"]},
        {"title": "Deploy guide", "text": "Searcher tooling", "location": "c", "owner": None, "count": 3},
    ]
    return build_type_index("docs", documents, analyzer)


@pytest.mark.unit
class TestBuildTypeIndex:
    def test_field_names_cover_every_document(self, index):
        assert index.field_names == frozenset({"title", "text", "location", "kind", "tags", "owner", "count"})

    def test_documents_kept_in_order_and_read_only(self, index):
        assert [doc["location"] for doc in index.documents] == ["a", "b", "c"]
        with pytest.raises(TypeError):
            index.documents[0]["title"] = "changed"  # type: ignore[index]

    def test_vocabulary_sorted_and_stemmed(self, index):
        assert list(index.vocabulary) == sorted(index.vocabulary)
        assert "search" in index.vocabulary
        assert "world" in index.vocabulary
        assert "world." not in index.vocabulary

    def test_postings_record_fields(self, index):
        postings = index.lookup_exact("search")

        assert [(p.doc, p.fields) for p in postings] == [(0, frozenset({"title"}))]

    def test_empty_batch_builds_empty_index(self, analyzer):
        empty = build_type_index("empty", [], analyzer)

        assert len(empty) == 0
        assert empty.field_names == frozenset()
        assert empty.match("anything", MatchMode.FUZZY, edit_distance=2) == set()

    def test_input_documents_are_copied(self, analyzer):
        source = {"title": "one", "location": "x"}
        built = build_type_index("t", [source], analyzer)
        source["title"] = "two"

        assert built.documents[0]["title"] == "one"

    def test_nested_values_are_copied(self, analyzer):
        source = {"location": "x", "tags": ["alpha"]}
        built = build_type_index("t", [source], analyzer)
        source["tags"].append("beta")

        assert built.documents[0]["tags"] == ["alpha"]
        assert built.documents_with_value("tags", "beta") == frozenset()

    def test_postings_carry_document_and_fields_only(self, index):
        (posting,) = index.lookup_exact("world")

        assert posting == Posting(doc=0, fields=frozenset({"text"}))


@pytest.mark.unit
class TestInvalidDocuments:
    def test_missing_identifier(self, analyzer):
        with pytest.raises(InvalidDocumentError) as excinfo:
            build_type_index("t", [{"location": "ok"}, {"title": "no id"}], analyzer)

        assert excinfo.value.position == 1
        assert excinfo.value.type_name == "t"
        assert "location" in str(excinfo.value)

    def test_blank_identifier(self, analyzer):
        with pytest.raises(InvalidDocumentError):
            build_type_index("t", [{"location": "  "}], analyzer)

    def test_duplicate_identifier(self, analyzer):
        with pytest.raises(InvalidDocumentError, match="duplicate"):
            build_type_index("t", [{"location": "x"}, {"location": "x"}], analyzer)

    def test_non_mapping_document(self, analyzer):
        with pytest.raises(InvalidDocumentError, match="mapping"):
            build_type_index("t", ["not a document"], analyzer)  # type: ignore[list-item]

    def test_custom_identifier_field(self, analyzer):
        built = build_type_index("t", [{"ref": "1"}], analyzer, identifier_field="ref")

        assert len(built) == 1
        with pytest.raises(InvalidDocumentError):
            build_type_index("t", [{"location": "1"}], analyzer, identifier_field="ref")


@pytest.mark.unit
class TestMatching:
    def test_exact(self, index):
        assert index.match("search", MatchMode.EXACT) == {0}
        assert index.match("missing", MatchMode.EXACT) == set()

    def test_prefix(self, index):
        assert index.match("test", MatchMode.PREFIX) == {1}
        assert sorted(index.iter_prefixed_terms("search")) == ["search", "searcher"]

    def test_fuzzy(self, index):
        assert index.match("testtitel", MatchMode.FUZZY, edit_distance=2) == {1}
        assert index.match("testtitel", MatchMode.FUZZY, edit_distance=1) == set()

    def test_field_restriction(self, index):
        assert index.match("search", MatchMode.EXACT, fields=["text"]) == set()
        assert index.match("search", MatchMode.EXACT, fields=["title"]) == {0}

    def test_numbers_are_searchable(self, index):
        assert index.match("3", MatchMode.EXACT) == {2}


@pytest.mark.unit
class TestKeywordLookup:
    def test_case_insensitive_equality(self, index):
        assert index.documents_with_value("kind", "component") == frozenset({0})
        assert index.documents_with_value("kind", "Component ") == frozenset({0})

    def test_list_field_matches_any_item(self, index):
        assert index.documents_with_value("tags", "beta") == frozenset({1})

    def test_list_filter_value_matches_any(self, index):
        assert index.documents_with_value("location", ["a", "c"]) == frozenset({0, 2})

    def test_unknown_field(self, index):
        assert index.documents_with_value("nope", "x") == frozenset()

    def test_numbers_and_booleans(self, index):
        assert index.documents_with_value("count", 3) == frozenset({2})
        assert normalize_keyword(True) == "true"
        assert normalize_keyword(" Mixed ") == "mixed"
