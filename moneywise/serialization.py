import json
import logging
import math
from datetime import date
from typing import Optional

from moneywise.aggregation import category_name
from moneywise.domain import FinanceData
from moneywise.functional import Either, Left, Right
from moneywise.periods import format_amount

logger = logging.getLogger(__name__)

CSV_HEADERS = ("Date", "Type", "Category", "Amount", "Note")


def dump_json(data: FinanceData) -> str:
    return json.dumps(data.to_dict(), indent=2, ensure_ascii=False)


def parse_finance_data(text: str) -> Either[dict, FinanceData]:
    """Parse a backup document.

    Beyond the two top-level members, records only need their required
    keys and a finite numeric amount. Unreadable dates are kept as they
    are; such transactions never fall inside a date range.
    """
    try:
        raw = json.loads(text)
    except (TypeError, ValueError) as e:
        logger.warning("Rejected finance document: invalid JSON (%s)", e)
        return Left({"error": "invalid_json", "message": f"Not valid JSON: {e}"})

    if not isinstance(raw, dict) or "transactions" not in raw or "categories" not in raw:
        logger.warning("Rejected finance document: missing transactions/categories")
        return Left({
            "error": "missing_members",
            "message": "Document must contain both 'transactions' and 'categories'",
        })

    try:
        data = FinanceData.from_dict(raw)
    except (KeyError, TypeError, AttributeError) as e:
        logger.warning("Rejected finance document: unreadable records (%r)", e)
        return Left({"error": "invalid_records", "message": f"Unreadable record: {e!r}"})

    bad = [t.id for t in data.transactions if not _is_amount(t.amount)]
    if bad:
        logger.warning("Rejected finance document: non-numeric amounts on %s", bad)
        return Left({
            "error": "invalid_records",
            "message": f"Amount is not a number on transaction(s): {', '.join(map(str, bad))}",
        })

    return Right(data)


def decode_backup(payload: bytes) -> Either[dict, str]:
    """Uploaded backup bytes as text; backups are always written as UTF-8."""
    try:
        return Right(payload.decode("utf-8"))
    except UnicodeDecodeError as e:
        logger.warning("Rejected finance document: not UTF-8 (%s)", e)
        return Left({"error": "invalid_encoding", "message": f"Not UTF-8 text: {e}"})


def _is_amount(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _csv_quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def to_csv(data: FinanceData) -> str:
    """One row per transaction, in storage order. The note is always quoted."""
    lines = [",".join(CSV_HEADERS)]
    for t in data.transactions:
        lines.append(",".join([
            t.date or "",
            t.type or "",
            category_name(data.categories, t.category_id),
            format_amount(t.amount),
            _csv_quote(t.note),
        ]))
    return "\n".join(lines)


def backup_filename(today: Optional[date] = None) -> str:
    return f"finance-backup-{(today or date.today()).isoformat()}.json"


def csv_filename(today: Optional[date] = None) -> str:
    return f"transactions-{(today or date.today()).isoformat()}.csv"
