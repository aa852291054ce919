import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parents[1] / "src"))

from statement_engine.core.parser_config import ParserConfig
from statement_engine.schemas.internal import ParsedTransaction


@pytest.fixture
def config() -> ParserConfig:
    """Default parser configuration, independent of environment settings."""
    return ParserConfig()


@pytest.fixture
def make_transaction():
    """Factory for ParsedTransaction instances with sensible defaults."""

    def _make(
        date: str = "2024-03-15",
        description: str = "Grocery Store",
        provider: str | None = None,
        amount: float = -45.67,
    ) -> ParsedTransaction:
        return ParsedTransaction(
            date=date,
            description=description,
            provider=provider or description,
            amount=amount,
        )

    return _make
