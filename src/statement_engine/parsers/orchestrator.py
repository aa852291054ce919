"""Parse orchestration.

The orchestrator feeds the raw statement text to each strategy in priority
order and commits to the first one whose candidates survive filtering:

    TryStrategy(i) -> Filter -> Accept | TryStrategy(i + 1)

Strategies that raise or return nothing are skipped; running out of
strategies yields an empty list, which is a valid outcome.
"""

import logging
import re

from statement_engine.core.parser_config import OBVIOUS_HEADER_MARKERS, ParserConfig
from statement_engine.parsers.normalizers.dates import is_valid_date
from statement_engine.parsers.strategies import STRATEGIES, Strategy
from statement_engine.schemas.internal import ParsedTransaction, ParseOutcome

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
DEDUP_DESCRIPTION_CHARS = 20


def filter_candidates(
    candidates: list[ParsedTransaction], config: ParserConfig
) -> list[ParsedTransaction]:
    """Drop candidates that cannot be real transaction rows.

    Strict filtering rejects any description containing a configured header
    keyword; lenient filtering only rejects the obvious balance/period rows.
    """
    markers = config.header_keywords if config.strict_filtering else OBVIOUS_HEADER_MARKERS

    kept = []
    for candidate in candidates:
        if not is_valid_date(candidate.date):
            continue
        length = len(candidate.description)
        if length < config.min_description_length or length > config.max_description_length:
            continue
        lowered = candidate.description.lower()
        if any(marker in lowered for marker in markers):
            continue
        kept.append(candidate)
    return kept


def dedup_key(transaction: ParsedTransaction) -> str:
    """date-amount-description prefix, insensitive to sign and punctuation."""
    prefix = _NON_ALNUM_RE.sub("", transaction.description.lower())[:DEDUP_DESCRIPTION_CHARS]
    return f"{transaction.date}-{abs(transaction.amount):.2f}-{prefix}"


def deduplicate(transactions: list[ParsedTransaction]) -> list[ParsedTransaction]:
    """Collapse duplicates, keeping the shorter description.

    The surviving record takes the position of the first occurrence, so the
    result preserves input order and deduplicate(deduplicate(x)) == deduplicate(x).
    """
    unique: dict[str, ParsedTransaction] = {}
    for transaction in transactions:
        key = dedup_key(transaction)
        existing = unique.get(key)
        if existing is None or len(transaction.description) < len(existing.description):
            unique[key] = transaction
    return list(unique.values())


class ParseOrchestrator:
    """Run strategies in order until one produces usable transactions.

    Example:
        >>> orchestrator = ParseOrchestrator()
        >>> orchestrator.run("2024-03-15 Grocery Store -45.67")[0].amount
        -45.67
    """

    def __init__(
        self,
        strategies: tuple[tuple[str, Strategy], ...] | list[tuple[str, Strategy]] = STRATEGIES,
        config: ParserConfig | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            strategies: Ordered (name, strategy) pairs
            config: Default parser configuration (default: ParserConfig())
        """
        self.strategies = list(strategies)
        self.config = config or ParserConfig()

    def run(self, text: str, config: ParserConfig | None = None) -> list[ParsedTransaction]:
        """Extract transactions from statement text."""
        return self.run_detailed(text, config).transactions

    def run_detailed(self, text: str, config: ParserConfig | None = None) -> ParseOutcome:
        """Extract transactions and report which strategy produced them.

        Args:
            text: Plain-text rendering of the statement
            config: Overrides the orchestrator's default configuration

        Returns:
            ParseOutcome with the committed transactions (possibly empty)
        """
        config = config or self.config
        text = text or ""
        lines = text.splitlines()
        attempted: list[str] = []

        for name, strategy in self.strategies:
            attempted.append(name)
            try:
                candidates = strategy(lines, text, config)
            except Exception as e:
                logger.debug(
                    "Strategy failed", extra={"strategy": name, "error": type(e).__name__}
                )
                continue

            if not candidates:
                logger.debug("Strategy found no candidates", extra={"strategy": name})
                continue

            filtered = filter_candidates(candidates, config)
            if not filtered:
                logger.debug(
                    "Strategy candidates all filtered out",
                    extra={"strategy": name, "candidates": len(candidates)},
                )
                continue

            transactions = deduplicate(filtered)
            logger.info(
                "Parsed %d transactions using %s",
                len(transactions),
                name,
                extra={"strategy": name, "candidates": len(candidates)},
            )
            return ParseOutcome(transactions=transactions, strategy=name, attempted=attempted)

        logger.info("No transactions found", extra={"strategies_tried": len(attempted)})
        return ParseOutcome(transactions=[], strategy=None, attempted=attempted)
