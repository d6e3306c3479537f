"""
Per-user record storage.

The calculators never touch storage.  Services read a user's records through
``FinanceStore`` and pass parsed values on, so the backend can be swapped:

- ``InMemoryStore`` for tests and throwaway sessions
- ``JsonFileStore`` keeps one JSON document per user under a data directory

Income, assets and the retirement plan are single records per user (upsert);
expenses and budget goals are lists and are soft-deleted by clearing
``is_active``.
"""

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog

from finance_planner.config import Settings, get_settings
from finance_planner.models import (
    AssetsRecord,
    BudgetGoalRecord,
    ExpenseRecord,
    IncomeRecord,
    RetirementPlanRecord,
    _utcnow,
)

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""
    pass


class NotFoundError(StorageError):
    """Raised when a record does not exist for the given user."""
    pass


class FinanceStore(ABC):
    """
    Abstract interface for the per-user key-value store.

    Every method is keyed by ``user_id``; a user never sees another user's
    records.
    """

    @abstractmethod
    def get_income(self, user_id: int) -> Optional[IncomeRecord]:
        pass

    @abstractmethod
    def upsert_income(self, record: IncomeRecord) -> IncomeRecord:
        pass

    @abstractmethod
    def get_expenses(self, user_id: int) -> list[ExpenseRecord]:
        """Active expenses, oldest first."""
        pass

    @abstractmethod
    def create_expense(self, record: ExpenseRecord) -> ExpenseRecord:
        """Store a new expense and return it with its assigned id."""
        pass

    @abstractmethod
    def update_expense(self, expense_id: int, user_id: int, changes: dict) -> ExpenseRecord:
        """
        Apply ``changes`` to an existing expense.

        Raises:
            NotFoundError: If the expense doesn't exist for this user
            pydantic.ValidationError: If the changes are invalid
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int, user_id: int) -> bool:
        """Deactivate an expense. Returns False if it wasn't found."""
        pass

    @abstractmethod
    def get_budget_goals(self, user_id: int) -> list[BudgetGoalRecord]:
        """Active budget goals, oldest first."""
        pass

    @abstractmethod
    def create_budget_goal(self, record: BudgetGoalRecord) -> BudgetGoalRecord:
        pass

    @abstractmethod
    def update_budget_goal(self, goal_id: int, user_id: int, changes: dict) -> BudgetGoalRecord:
        """
        Apply ``changes`` to an existing budget goal.

        Raises:
            NotFoundError: If the goal doesn't exist for this user
            pydantic.ValidationError: If the changes are invalid
        """
        pass

    @abstractmethod
    def delete_budget_goal(self, goal_id: int, user_id: int) -> bool:
        """Deactivate a budget goal. Returns False if it wasn't found."""
        pass

    @abstractmethod
    def get_assets(self, user_id: int) -> Optional[AssetsRecord]:
        pass

    @abstractmethod
    def upsert_assets(self, record: AssetsRecord) -> AssetsRecord:
        pass

    @abstractmethod
    def get_retirement_plan(self, user_id: int) -> Optional[RetirementPlanRecord]:
        pass

    @abstractmethod
    def upsert_retirement_plan(self, record: RetirementPlanRecord) -> RetirementPlanRecord:
        pass


def _empty_document() -> dict:
    return {
        "income": None,
        "assets": None,
        "retirement_plan": None,
        "expenses": [],
        "budget_goals": [],
    }


class _DocumentStore(FinanceStore):
    """
    Shared logic for stores that keep one document per user.

    Subclasses implement ``_load`` and ``_save``.  Each public method holds the
    instance lock for its whole read-modify-write.
    """

    def __init__(self):
        self._lock = threading.Lock()

    @abstractmethod
    def _load(self, user_id: int) -> dict:
        pass

    @abstractmethod
    def _save(self, user_id: int, doc: dict) -> None:
        pass

    def _get_single(self, user_id: int, key: str, model):
        with self._lock:
            data = self._load(user_id)[key]
        return model.model_validate(data) if data is not None else None

    def _upsert_single(self, key: str, record):
        record = record.model_copy(update={"updated_at": _utcnow()})
        with self._lock:
            doc = self._load(record.user_id)
            created = doc[key] is None
            doc[key] = record.model_dump(mode="json")
            self._save(record.user_id, doc)
        logger.info("record_saved", kind=key, user_id=record.user_id, created=created)
        return record

    # List records (expenses, budget goals): ids count up per user and rows
    # are never removed, only deactivated.

    def _list_rows(self, user_id: int, key: str, model) -> list:
        with self._lock:
            rows = self._load(user_id)[key]
        items = [model.model_validate(r) for r in rows if r.get("is_active", True)]
        items.sort(key=lambda r: (r.created_at, r.id or 0))
        return items

    def _create_row(self, key: str, kind: str, record):
        with self._lock:
            doc = self._load(record.user_id)
            ids = [r["id"] for r in doc[key] if r.get("id") is not None]
            record = record.model_copy(update={"id": max(ids, default=0) + 1})
            doc[key].append(record.model_dump(mode="json"))
            self._save(record.user_id, doc)
        logger.info(f"{kind}_created", user_id=record.user_id, record_id=record.id)
        return record

    def _update_row(self, key: str, kind: str, model, row_id: int, user_id: int, changes: dict):
        changes = {k: v for k, v in changes.items() if k not in ("id", "user_id", "created_at")}
        with self._lock:
            doc = self._load(user_id)
            for i, row in enumerate(doc[key]):
                if row.get("id") == row_id:
                    updated = model.model_validate({**row, **changes})
                    doc[key][i] = updated.model_dump(mode="json")
                    self._save(user_id, doc)
                    break
            else:
                label = kind.replace("_", " ").capitalize()
                raise NotFoundError(f"{label} {row_id} not found for user {user_id}")
        logger.info(f"{kind}_updated", user_id=user_id, record_id=row_id)
        return updated

    def _deactivate_row(self, key: str, kind: str, row_id: int, user_id: int) -> bool:
        with self._lock:
            doc = self._load(user_id)
            for row in doc[key]:
                if row.get("id") == row_id and row.get("is_active", True):
                    row["is_active"] = False
                    self._save(user_id, doc)
                    break
            else:
                logger.warning(f"{kind}_delete_missing", user_id=user_id, record_id=row_id)
                return False
        logger.info(f"{kind}_deleted", user_id=user_id, record_id=row_id)
        return True

    def get_income(self, user_id: int) -> Optional[IncomeRecord]:
        return self._get_single(user_id, "income", IncomeRecord)

    def upsert_income(self, record: IncomeRecord) -> IncomeRecord:
        return self._upsert_single("income", record)

    def get_assets(self, user_id: int) -> Optional[AssetsRecord]:
        return self._get_single(user_id, "assets", AssetsRecord)

    def upsert_assets(self, record: AssetsRecord) -> AssetsRecord:
        return self._upsert_single("assets", record)

    def get_retirement_plan(self, user_id: int) -> Optional[RetirementPlanRecord]:
        return self._get_single(user_id, "retirement_plan", RetirementPlanRecord)

    def upsert_retirement_plan(self, record: RetirementPlanRecord) -> RetirementPlanRecord:
        return self._upsert_single("retirement_plan", record)

    def get_expenses(self, user_id: int) -> list[ExpenseRecord]:
        return self._list_rows(user_id, "expenses", ExpenseRecord)

    def create_expense(self, record: ExpenseRecord) -> ExpenseRecord:
        return self._create_row("expenses", "expense", record)

    def update_expense(self, expense_id: int, user_id: int, changes: dict) -> ExpenseRecord:
        return self._update_row("expenses", "expense", ExpenseRecord, expense_id, user_id, changes)

    def delete_expense(self, expense_id: int, user_id: int) -> bool:
        return self._deactivate_row("expenses", "expense", expense_id, user_id)

    def get_budget_goals(self, user_id: int) -> list[BudgetGoalRecord]:
        return self._list_rows(user_id, "budget_goals", BudgetGoalRecord)

    def create_budget_goal(self, record: BudgetGoalRecord) -> BudgetGoalRecord:
        return self._create_row("budget_goals", "budget_goal", record)

    def update_budget_goal(self, goal_id: int, user_id: int, changes: dict) -> BudgetGoalRecord:
        return self._update_row(
            "budget_goals", "budget_goal", BudgetGoalRecord, goal_id, user_id, changes
        )

    def delete_budget_goal(self, goal_id: int, user_id: int) -> bool:
        return self._deactivate_row("budget_goals", "budget_goal", goal_id, user_id)


class InMemoryStore(_DocumentStore):
    """Dictionary-backed store. Nothing survives the process."""

    def __init__(self):
        super().__init__()
        self._docs: dict[int, dict] = {}

    def _load(self, user_id: int) -> dict:
        # Hand out a copy so a failed update leaves the stored document untouched.
        return json.loads(json.dumps(self._docs.get(user_id, _empty_document())))

    def _save(self, user_id: int, doc: dict) -> None:
        self._docs[user_id] = doc


class JsonFileStore(_DocumentStore):
    """
    Stores each user's records in ``<data_dir>/users/<user_id>.json``.
    """

    def __init__(self, data_dir: Path):
        super().__init__()
        self._dir = Path(data_dir) / "users"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: int) -> Path:
        return self._dir / f"{int(user_id)}.json"

    def _load(self, user_id: int) -> dict:
        path = self._path(user_id)
        if not path.exists():
            return _empty_document()
        try:
            with open(path, "r", encoding="utf-8") as f:
                doc = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("store_read_failed", user_id=user_id, path=str(path), error=str(e))
            raise StorageError(f"Cannot read records for user {user_id}: {e}") from e
        if not isinstance(doc, dict):
            logger.error("store_read_failed", user_id=user_id, path=str(path), error="not an object")
            raise StorageError(f"Cannot read records for user {user_id}: not a JSON object")
        base = _empty_document()
        base.update(doc)
        return base

    def _save(self, user_id: int, doc: dict) -> None:
        path = self._path(user_id)
        tmp = path.with_suffix(".json.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2)
            tmp.replace(path)
        except OSError as e:
            logger.error("store_write_failed", user_id=user_id, path=str(path), error=str(e))
            raise StorageError(f"Cannot write records for user {user_id}: {e}") from e


def create_store(settings: Optional[Settings] = None) -> FinanceStore:
    """Build the store selected by ``Settings.storage_backend``."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return InMemoryStore()
    return JsonFileStore(settings.data_dir)
