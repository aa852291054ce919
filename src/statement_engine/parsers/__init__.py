"""Statement parsing module.

Turns the plain text of a bank or card statement into transactions without
any per-bank configuration:
- PDFExtractor produces the text
- ParseOrchestrator tries layout strategies in priority order
- StatementParser / parse_statement tie the two together
"""

from statement_engine.parsers.extractor import PDFExtractor
from statement_engine.parsers.factory import (
    StatementParser,
    get_statement_parser,
    parse_statement,
)
from statement_engine.parsers.orchestrator import ParseOrchestrator

__all__ = [
    "PDFExtractor",
    "ParseOrchestrator",
    "StatementParser",
    "get_statement_parser",
    "parse_statement",
]
