"""Data Access Layer for expenses and the metadata key/value table.

Responsibilities
----------------
- CRUD helpers for expense rows (amounts are always NGN at this layer).
- Period / category filtered listing used by the dashboard and budget checks.
- Raw string get/set/has/list access to the metadata table, wrapped by the
  key-value store in `spendwise.services.storage`.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3
import uuid
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from spendwise.models import ExpenseCategory, ExpenseRecord

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Metadata key/value access
    def get_meta(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM metadata WHERE key = ?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set_meta(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO metadata (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = ({UTC_NOW_SQL})
                """,
                (key, value),
            )

    def has_meta(self, key: str) -> bool:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT 1 FROM metadata WHERE key = ?", (key,))
            return cur.fetchone() is not None

    def list_meta_keys(self, prefix: str = "") -> List[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "SELECT key FROM metadata WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            )
            return [r[0] for r in cur.fetchall()]

    # ------------------------------------------------------------------
    # Expenses
    def insert_expense(
        self,
        amount: float,
        category: ExpenseCategory,
        description: Optional[str],
        expense_date: date,
    ) -> str:
        expense_id = str(uuid.uuid4())
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO expenses (id, amount, category, description, expense_date, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (
                    expense_id,
                    amount,
                    ExpenseCategory(category).value,
                    description,
                    expense_date.isoformat(),
                ),
            )
        return expense_id

    def get_expense(self, expense_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM expenses WHERE id = ?", (expense_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def list_expenses(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[ExpenseCategory] = None,
    ) -> List[Dict[str, Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        if start_date:
            clauses.append("expense_date >= ?")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append("expense_date <= ?")
            params.append(end_date.isoformat())
        if category:
            clauses.append("category = ?")
            params.append(ExpenseCategory(category).value)
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        sql = f"SELECT * FROM expenses{where} ORDER BY expense_date DESC, created_at DESC"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [dict(r) for r in cur.fetchall()]

    def count_expenses(self) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM expenses")
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    def update_expense(
        self,
        expense_id: str,
        amount: float,
        category: ExpenseCategory,
        description: Optional[str],
        expense_date: date,
    ) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE expenses
                SET amount = ?, category = ?, description = ?, expense_date = ?,
                    updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (
                    amount,
                    ExpenseCategory(category).value,
                    description,
                    expense_date.isoformat(),
                    expense_id,
                ),
            )
            if cur.rowcount == 0:
                raise ValueError(f"expense {expense_id} not found")

    def delete_expense(self, expense_id: str) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            if cur.rowcount == 0:
                raise ValueError(f"expense {expense_id} not found")

    def replace_expenses(self, records: Iterable[ExpenseRecord]) -> int:
        """Atomically replace every expense with the given records."""
        rows = [
            (
                r.id,
                r.amount,
                r.category.value,
                r.description,
                r.expense_date.isoformat(),
                r.created_at.isoformat() if r.created_at else None,
                r.updated_at.isoformat() if r.updated_at else None,
            )
            for r in records
        ]
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute("DELETE FROM expenses")
            cur.executemany(
                f"""
                INSERT INTO expenses (id, amount, category, description, expense_date, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, COALESCE(?, ({UTC_NOW_SQL})), COALESCE(?, ({UTC_NOW_SQL})))
                """,
                rows,
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        return len(rows)
