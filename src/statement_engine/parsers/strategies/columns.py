"""Column-oriented strategies: whitespace tables and delimiter-separated rows."""

import csv
import re

from statement_engine.core.parser_config import ParserConfig
from statement_engine.parsers.normalizers.dates import parse_date_text
from statement_engine.parsers.strategies.base import amount_regex, build_transaction
from statement_engine.schemas.internal import ParsedTransaction

_COLUMN_SPLIT_RE = re.compile(r"\s{2,}|\t")
_DIGITS_ONLY_RE = re.compile(r"^[\d\s]+$")

# Tab and semicolon first: a comma is also a thousands/decimal separator.
DELIMITERS = ("\t", ";", "|", ",")


def _is_header_row(line: str) -> bool:
    lowered = line.lower()
    return "date" in lowered and ("description" in lowered or "details" in lowered)


def tabular_columns(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """Rows whose columns are separated by two or more spaces or a tab.

    The first column that reads as a date starts the record, the first later
    column that is entirely an amount ends it, and the columns in between
    form the description.
    """
    pattern = amount_regex(config)
    transactions: list[ParsedTransaction] = []

    for raw_line in lines:
        line = raw_line.strip()
        if len(line) < 10 or _is_header_row(line):
            continue

        columns = [column.strip() for column in _COLUMN_SPLIT_RE.split(line) if column.strip()]
        if len(columns) < 3:
            continue

        for date_index, column in enumerate(columns):
            date_iso = parse_date_text(column, config)
            if date_iso is None:
                continue

            for amount_index in range(date_index + 1, len(columns)):
                if not pattern.fullmatch(columns[amount_index]):
                    continue
                description = " ".join(columns[date_index + 1 : amount_index])
                if description:
                    transaction = build_transaction(
                        date_iso, description, columns[amount_index], config
                    )
                    if transaction is not None:
                        transactions.append(transaction)
                break
            break

    return transactions


def delimited_fields(
    lines: list[str], text: str, config: ParserConfig
) -> list[ParsedTransaction]:
    """CSV-like rows (tab, semicolon, pipe or comma separated).

    Fields are classified independently: the first date-like field is the
    date, the first amount-like field the amount, and the first remaining
    field longer than two characters that is not purely numeric the
    description.
    """
    pattern = amount_regex(config)
    transactions: list[ParsedTransaction] = []

    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue

        for delimiter in DELIMITERS:
            if delimiter not in line:
                continue

            fields = [field.strip() for field in next(csv.reader([line], delimiter=delimiter))]
            if len(fields) < 3:
                continue

            date_iso = None
            amount_text = None
            description = None
            for field in fields:
                if not field:
                    continue
                if date_iso is None:
                    parsed = parse_date_text(field, config)
                    if parsed is not None:
                        date_iso = parsed
                        continue
                if amount_text is None and pattern.fullmatch(field):
                    amount_text = field
                    continue
                if description is None and len(field) > 2 and not _DIGITS_ONLY_RE.match(field):
                    description = field

            if date_iso and amount_text and description:
                transaction = build_transaction(date_iso, description, amount_text, config)
                if transaction is not None:
                    transactions.append(transaction)
            break

    return transactions
