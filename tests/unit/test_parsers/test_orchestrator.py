"""Tests for the parse orchestrator, candidate filtering and deduplication."""

import pytest

from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.orchestrator import (
    ParseOrchestrator,
    dedup_key,
    deduplicate,
    filter_candidates,
)


class CountingStrategy:
    """Strategy double that records how often it ran."""

    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error
        self.calls = 0

    def __call__(self, lines, text, config):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.result)


class TestOrchestratorFlow:
    """Strategy iteration and short-circuiting."""

    def test_stops_at_first_successful_strategy(self, make_transaction):
        empty = CountingStrategy()
        winner = CountingStrategy([make_transaction()])
        never = CountingStrategy([make_transaction(description="Never used")])
        orchestrator = ParseOrchestrator(
            [("empty", empty), ("winner", winner), ("never", never)]
        )

        outcome = orchestrator.run_detailed("anything")

        assert [t.description for t in outcome.transactions] == ["Grocery Store"]
        assert outcome.strategy == "winner"
        assert outcome.attempted == ["empty", "winner"]
        assert (empty.calls, winner.calls, never.calls) == (1, 1, 0)

    def test_failing_strategy_is_skipped(self, make_transaction):
        broken = CountingStrategy(error=RuntimeError("boom"))
        working = CountingStrategy([make_transaction()])
        orchestrator = ParseOrchestrator([("broken", broken), ("working", working)])

        outcome = orchestrator.run_detailed("anything")

        assert outcome.strategy == "working"
        assert len(outcome.transactions) == 1

    def test_fully_filtered_strategy_is_skipped(self, make_transaction):
        headers_only = CountingStrategy([make_transaction(description="Opening balance")])
        working = CountingStrategy([make_transaction()])
        orchestrator = ParseOrchestrator([("headers", headers_only), ("working", working)])

        outcome = orchestrator.run_detailed("anything")

        assert outcome.strategy == "working"
        assert working.calls == 1

    def test_no_strategy_succeeds(self):
        strategies = [("a", CountingStrategy()), ("b", CountingStrategy())]

        outcome = ParseOrchestrator(strategies).run_detailed("anything")

        assert outcome.transactions == []
        assert outcome.strategy is None
        assert outcome.attempted == ["a", "b"]

    def test_strategies_receive_lines_and_text(self):
        seen = {}

        def spy(lines, text, config):
            seen.update(lines=lines, text=text, config=config)
            return []

        config = ParserConfig(strict_filtering=False)
        ParseOrchestrator([("spy", spy)], config=config).run("line one\nline two")

        assert seen["lines"] == ["line one", "line two"]
        assert seen["text"] == "line one\nline two"
        assert seen["config"] is config

    def test_call_config_overrides_default(self, make_transaction):
        total_row = CountingStrategy([make_transaction(description="Total purchases")])
        orchestrator = ParseOrchestrator([("rows", total_row)])

        assert orchestrator.run("x") == []
        assert len(orchestrator.run("x", ParserConfig(strict_filtering=False))) == 1

    def test_run_returns_deduplicated_transactions(self, make_transaction):
        rows = CountingStrategy([make_transaction(), make_transaction()])

        assert len(ParseOrchestrator([("rows", rows)]).run("x")) == 1


class TestFilterCandidates:
    """Validity, length and header filtering."""

    def test_strict_rejects_header_keywords(self, config, make_transaction):
        candidates = [
            make_transaction(description="Grocery Store"),
            make_transaction(description="Total purchases"),
            make_transaction(description="Opening balance"),
            make_transaction(description="Page 1 of 3"),
        ]

        kept = filter_candidates(candidates, config)

        assert [t.description for t in kept] == ["Grocery Store"]

    def test_lenient_rejects_only_obvious_markers(self, make_transaction):
        config = ParserConfig(strict_filtering=False)
        candidates = [
            make_transaction(description="Total purchases"),
            make_transaction(description="Closing Balance"),
            make_transaction(description="Statement period March"),
        ]

        kept = filter_candidates(candidates, config)

        assert [t.description for t in kept] == ["Total purchases"]

    def test_invalid_calendar_date_rejected(self, config, make_transaction):
        assert filter_candidates([make_transaction(date="2024-02-30")], config) == []

    def test_description_length_bounds(self, make_transaction):
        config = ParserConfig(min_description_length=3, max_description_length=10)
        candidates = [
            make_transaction(description="ab"),
            make_transaction(description="abc"),
            make_transaction(description="abcdefghij"),
            make_transaction(description="abcdefghijk"),
        ]

        kept = filter_candidates(candidates, config)

        assert [t.description for t in kept] == ["abc", "abcdefghij"]

    def test_custom_header_keywords(self, make_transaction):
        config = ParserConfig(header_keywords=("Saldo",))

        kept = filter_candidates(
            [make_transaction(description="Saldo anterior"), make_transaction()], config
        )

        assert [t.description for t in kept] == ["Grocery Store"]


class TestDeduplicate:
    """Collapse of repeated candidates."""

    def test_key_ignores_sign_case_and_punctuation(self, make_transaction):
        a = make_transaction(description="Coffee-Shop, London", amount=-4.5)
        b = make_transaction(description="COFFEE SHOP LONDON", amount=4.5)

        assert dedup_key(a) == dedup_key(b) == "2024-03-15-4.50-coffeeshoplondon"

    def test_keeps_shorter_description_in_first_position(self, make_transaction):
        long = make_transaction(description="Coffee Shop London Bridge Road")
        other = make_transaction(description="Bakery", amount=-2.1)
        short = make_transaction(description="Coffee Shop London Bridge")

        result = deduplicate([long, other, short])

        assert [t.description for t in result] == ["Coffee Shop London Bridge", "Bakery"]

    def test_different_dates_are_kept(self, make_transaction):
        result = deduplicate(
            [make_transaction(date="2024-03-15"), make_transaction(date="2024-03-16")]
        )

        assert len(result) == 2

    @pytest.mark.parametrize(
        "descriptions",
        [
            ["Coffee Shop London Bridge Road", "Coffee Shop London Bridge", "Bakery"],
            ["Bakery", "Bakery", "Bakery"],
            [],
        ],
    )
    def test_idempotent(self, make_transaction, descriptions):
        candidates = [make_transaction(description=d) for d in descriptions]

        once = deduplicate(candidates)

        assert deduplicate(once) == once
