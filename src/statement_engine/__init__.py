"""Layout-agnostic transaction extraction from bank statement PDFs."""

from statement_engine.parsers.factory import StatementParser, parse_statement
from statement_engine.schemas.internal import ParsedTransaction

__version__ = "0.1.0"

__all__ = ["ParsedTransaction", "StatementParser", "parse_statement", "__version__"]
