"""Expense backup export / import.

Export produces a JSON array of every expense (amounts in NGN). Import takes
the same shape and replaces all stored expenses in one transaction; anything
other than a list of valid records is rejected with `ImportFormatError` and
leaves existing data untouched. Preferences are not part of a backup.
"""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, List, Set

from pydantic import ValidationError

from spendwise.core.errors import ImportFormatError
from spendwise.db.dal import Database
from spendwise.models import ExpenseRecord

EXPORT_FIELDS = (
    "id",
    "amount",
    "category",
    "description",
    "expense_date",
    "created_at",
    "updated_at",
)


def backup_filename(today: date) -> str:
    return f"spendwise_backup_{today.isoformat()}.json"


def export_expenses(db: Database) -> List[Dict[str, Any]]:
    return [{k: row.get(k) for k in EXPORT_FIELDS} for row in db.list_expenses()]


def parse_backup(payload: Any) -> List[ExpenseRecord]:
    if not isinstance(payload, list):
        raise ImportFormatError("Invalid file format: expected a JSON array of expenses")
    records: List[ExpenseRecord] = []
    seen: Set[str] = set()
    for idx, item in enumerate(payload):
        try:
            record = ExpenseRecord.model_validate(item)
        except ValidationError as e:
            first = e.errors()[0]
            loc = ".".join(str(p) for p in first.get("loc", ()))
            raise ImportFormatError(
                f"Invalid expense at index {idx}: {loc} {first.get('msg')}".strip()
            ) from e
        if record.id in seen:
            raise ImportFormatError(f"Duplicate expense id '{record.id}' at index {idx}")
        seen.add(record.id)
        records.append(record)
    return records


def import_expenses(db: Database, payload: Any) -> int:
    """Validate the whole payload first, then replace stored expenses."""
    records = parse_backup(payload)
    return db.replace_expenses(records)


__all__ = ["backup_filename", "export_expenses", "parse_backup", "import_expenses"]
