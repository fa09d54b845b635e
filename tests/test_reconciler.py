"""Tests for the section reconciler."""

from factories import finished, live, scheduled, upload
from subfilter.matcher import CompiledRule
from subfilter.models.rule import Rule
from subfilter.reconciler import SectionSplitter, reconcile, reconcile_all, reset_all
from subfilter.views.memory import MemoryPlaceholder, MemorySection


def _visibility(section):
    return (
        section.hidden,
        section.heading_hidden,
        [node.hidden for node in section.nodes],
    )


def test_hides_only_matching_items(sample_document, hide_bob_live):
    today, this_week = sample_document.sections()

    results = reconcile_all(sample_document.sections(), [hide_bob_live])

    assert [item.hidden for item in today.items()] == [False, True, False]
    assert [item.hidden for item in this_week.items()] == [True, False]
    assert not today.hidden and not this_week.hidden
    assert [r.hidden for r in results] == [1, 1]
    assert [r.kept for r in results] == [2, 1]


def test_placeholders_are_never_touched():
    spinner = MemoryPlaceholder()
    section = MemorySection(nodes=[live(), spinner])

    result = reconcile(section, [Rule(source="^", stream_live="^")])

    assert spinner.hidden is False
    # The placeholder does not keep the section alive
    assert result.collapsed is True


def test_collapses_primary_section_with_heading():
    section = MemorySection(nodes=[live(), live(), finished()], is_primary=True)
    rule = Rule(source="^Bob$", stream_live="^", stream_finished="^")

    result = reconcile(section, [rule])

    assert result.collapsed is True
    assert section.hidden is True
    assert section.heading_hidden is True


def test_collapse_does_not_touch_heading_of_other_sections(sample_document):
    today, this_week = sample_document.sections()
    rule = Rule(source="^Bob$", stream_live="^", stream_finished="^")

    results = reconcile_all(sample_document.sections(), [rule])

    assert results[1].collapsed is True
    assert this_week.hidden is True
    assert this_week.heading_hidden is False
    # Sibling primary section stays up
    assert today.hidden is False
    assert today.heading_hidden is False


def test_empty_section_stays_visible():
    section = MemorySection(nodes=[MemoryPlaceholder()], is_primary=True)

    result = reconcile(section, [Rule(source="^", other="^")])

    assert result.collapsed is False
    assert section.hidden is False


def test_no_rules_shows_everything():
    section = MemorySection(nodes=[live(), upload()])
    section.nodes[0].hidden = True

    reconcile(section, [])

    assert [node.hidden for node in section.nodes] == [False, False]


def test_reconcile_is_idempotent(sample_document, hide_bob_live):
    rules = [hide_bob_live, Rule(source="^Dave$", other="bike")]

    reconcile_all(sample_document.sections(), rules)
    first = [_visibility(s) for s in sample_document.sections()]
    reconcile_all(sample_document.sections(), rules)
    second = [_visibility(s) for s in sample_document.sections()]

    assert first == second


def test_hides_are_monotonic_within_a_pass():
    section = MemorySection(nodes=[live(), live(source="Zed")])
    splitter = SectionSplitter(section)

    splitter.split(CompiledRule.compile(Rule(source="^Bob$", stream_live="^")))
    hidden_after_first = list(splitter.hide)
    splitter.split(CompiledRule.compile(Rule(source="^Nobody$", stream_live="^")))
    splitter.split(CompiledRule.compile(Rule(source="^Bob$", enabled=False, stream_live="^")))

    assert hidden_after_first == [section.nodes[0]]
    assert splitter.hide == hidden_after_first
    assert splitter.keep == [section.nodes[1]]


def test_disabled_rule_hides_nothing(sample_document):
    rule = Rule(
        enabled=False,
        source="^",
        stream_scheduled="^",
        stream_live="^",
        stream_finished="^",
        other="^",
    )

    results = reconcile_all(sample_document.sections(), [rule])

    assert all(r.hidden == 0 for r in results)


def test_item_shown_again_when_no_longer_matched():
    section = MemorySection(nodes=[live(), scheduled()])
    reconcile(section, [Rule(source="^Bob$", stream_live="^")])
    assert section.nodes[0].hidden is True

    reconcile(section, [Rule(source="^Alice$", stream_scheduled="^")])

    assert section.nodes[0].hidden is False
    assert section.nodes[1].hidden is True


def test_reset_all_restores_everything(sample_document):
    rule = Rule(source="^", stream_scheduled="^", stream_live="^", stream_finished="^", other="^")
    reconcile_all(sample_document.sections(), [rule])
    assert all(s.hidden for s in sample_document.sections())

    count = reset_all(sample_document.sections())

    assert count == 2
    for section in sample_document.sections():
        assert section.hidden is False
        assert section.heading_hidden is False
        assert not any(node.hidden for node in section.nodes)
