import pytest

from stages.s1_classification import SheetClassifier
from utils.vocabulary import SHEET_VOCABULARY, match_identifier, names_match


def test_exact_vocabulary_names_are_selected_in_store_order(make_store):
    store = make_store(
        "DiscreteTimeStatsByRep", "Notes", "AcrossReplicationsSummary", "Chart1"
    )

    matched = SheetClassifier().classify(store)

    assert [s.name for s in matched] == ["DiscreteTimeStatsByRep", "AcrossReplicationsSummary"]


def test_substring_match_works_in_both_directions():
    # sheet name contains the identifier
    assert names_match("AcrossReplicationsSummary (2)", "AcrossReplicationsSummary")
    # identifier contains the sheet name
    assert names_match("CounterStats", "CounterStatsByRep")
    assert not names_match("Notes", "CounterStatsByRep")


def test_match_is_case_sensitive(make_store):
    store = make_store("acrossreplicationssummary", "COUNTERSTATSBYREP")

    assert SheetClassifier().classify(store) == ()


def test_no_known_sheets_falls_back_to_all(make_store):
    store = make_store("Inputs", "Results", "Chart1")
    classifier = SheetClassifier()

    assert classifier.classify(store) == ()


@pytest.mark.asyncio
async def test_fallback_selection_preserves_every_sheet(make_store):
    store = make_store("Inputs", "Results", "Chart1")

    selection = await SheetClassifier().execute(store)

    assert selection.fallback_used
    assert selection.matched == ()
    assert len(selection.selected) == len(store)
    assert [s.name for s in selection.selected] == store.names


@pytest.mark.asyncio
async def test_selection_reports_found_and_missing_identifiers(make_store):
    store = make_store("AcrossReplicationsSummary", "CounterStatsByRep", "Notes")

    selection = await SheetClassifier().execute(store)

    assert not selection.fallback_used
    assert [s.name for s in selection.selected] == ["AcrossReplicationsSummary", "CounterStatsByRep"]
    assert selection.matched_identifiers == ("AcrossReplicationsSummary", "CounterStatsByRep")
    assert "DiscreteTimeStatsByRep" in selection.missing_identifiers
    assert "AcrossReplicationsSummary" not in selection.missing_identifiers


def test_injected_vocabulary_replaces_default(make_store):
    store = make_store("ResourceUsage", "AcrossReplicationsSummary")
    classifier = SheetClassifier(vocabulary={"Resources": ["ResourceUsage"]})

    assert [s.name for s in classifier.classify(store)] == ["ResourceUsage"]


def test_alias_resolves_to_canonical_identifier():
    vocabulary = {"AcrossReplicationsSummary": ["Category Overview"]}

    assert match_identifier("Category Overview", vocabulary) == "AcrossReplicationsSummary"
    assert match_identifier("Queues", vocabulary) is None


def test_default_vocabulary_contains_known_exports():
    assert "AcrossReplicationsSummary" in SHEET_VOCABULARY
    assert "FrequencyStatsByRep" in SHEET_VOCABULARY
