"""In-memory task store.

Owns every Task record for the lifetime of the process. All public methods
run under a single lock and hand out deep copies, so callers can never
mutate stored records in place. Missing records (and records in the wrong
visibility state) are reported by returning ``None`` / ``False``, never by
raising; translating that into an HTTP error is the caller's job.
"""

from __future__ import annotations

import logging
import math
import threading
import uuid
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timezone

from todo_api.models import (
    TERMINAL_STATUSES,
    Pagination,
    SortField,
    SortOrder,
    Task,
    TaskCreate,
    TaskListQuery,
    TaskPage,
    TaskStats,
    TaskStatus,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _sort_key(field: SortField) -> Callable[[Task], object]:
    if field is SortField.priority:
        return lambda task: task.priority.rank
    if field is SortField.title:
        return lambda task: task.title
    if field is SortField.updated_at:
        return lambda task: task.updated_at
    if field is SortField.due_date:
        return lambda task: task.due_date
    return lambda task: task.created_at


def _matches(task: Task, query: TaskListQuery) -> bool:
    """True when *task* satisfies every filter set on *query*."""
    if query.status is not None and task.status != query.status:
        return False
    if query.priority is not None and task.priority != query.priority:
        return False
    if query.tag:
        wanted = query.tag.lower()
        if not any(tag.lower() == wanted for tag in task.tags):
            return False
    if query.search:
        needle = query.search.lower()
        in_title = needle in task.title.lower()
        in_description = (
            task.description is not None and needle in task.description.lower()
        )
        if not (in_title or in_description):
            return False
    return True


def _sorted(tasks: list[Task], field: SortField, order: SortOrder) -> list[Task]:
    """Sort *tasks* by *field*; ties keep their original relative order.

    For ``due_date``, tasks without a due date always come last, whichever
    direction is requested.
    """
    reverse = order is SortOrder.desc
    key = _sort_key(field)
    if field is SortField.due_date:
        dated = [t for t in tasks if t.due_date is not None]
        undated = [t for t in tasks if t.due_date is None]
        return sorted(dated, key=key, reverse=reverse) + undated
    return sorted(tasks, key=key, reverse=reverse)


class TaskStore:
    """Thread-safe in-memory repository of Task records.

    Internal state:
        _tasks: dict mapping task id -> Task (tombstoned records included)
        _issued_ids: every id ever handed out, so none is reused
        _lock: threading.Lock serialising every public call

    Parameters
    ----------
    clock : callable, optional
        Returns the current time as an aware UTC datetime. Defaults to the
        system clock; tests pass a fake one.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._tasks: dict[str, Task] = {}
        self._issued_ids: set[str] = set()
        self._clock: Clock = clock or _utcnow
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    # -- helpers (caller holds the lock) --------------------------------------

    def _new_id(self) -> str:
        task_id = str(uuid.uuid4())
        while task_id in self._issued_ids:
            task_id = str(uuid.uuid4())
        self._issued_ids.add(task_id)
        return task_id

    def _stamp(self, previous: datetime | None = None) -> datetime:
        """Return "now", never earlier than *previous*."""
        now = self._clock()
        if previous is not None and now < previous:
            return previous
        return now

    def _live(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        if task is None or task.deleted_at is not None:
            return None
        return task

    @staticmethod
    def _copy(task: Task) -> Task:
        return task.model_copy(deep=True)

    # -- writes ---------------------------------------------------------------

    def create(self, data: TaskCreate) -> Task:
        """Store a new pending task built from already-validated input."""
        with self._lock:
            now = self._stamp()
            task = Task(
                id=self._new_id(),
                title=data.title,
                description=data.description,
                status=TaskStatus.pending,
                priority=data.priority,
                due_date=data.due_date,
                tags=list(data.tags),
                created_at=now,
                updated_at=now,
                completed_at=None,
                deleted_at=None,
            )
            self._tasks[task.id] = task
            logger.debug(
                "Task created id=%s priority=%s", task.id, task.priority.value
            )
            return self._copy(task)

    def update(self, task_id: str, patch: TaskUpdate) -> Task | None:
        """Apply the supplied fields of *patch* to a live task.

        Fields absent from the patch are left alone; ``description`` and
        ``due_date`` sent as ``None`` are cleared. Moving into ``completed``
        stamps ``completed_at``; any other supplied status clears it.
        """
        with self._lock:
            existing = self._live(task_id)
            if existing is None:
                return None

            changes = patch.changes()
            now = self._stamp(existing.updated_at)
            updated = existing.model_copy(
                update={**changes, "updated_at": now}, deep=True
            )

            if "status" in changes:
                new_status = changes["status"]
                if new_status == TaskStatus.completed:
                    if existing.status != TaskStatus.completed:
                        updated.completed_at = now
                else:
                    updated.completed_at = None

            self._tasks[task_id] = updated
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
            return self._copy(updated)

    def soft_delete(self, task_id: str) -> Task | None:
        """Tombstone a live task. Returns None if it is missing or already deleted."""
        with self._lock:
            existing = self._live(task_id)
            if existing is None:
                return None
            now = self._stamp(existing.updated_at)
            deleted = existing.model_copy(
                update={"deleted_at": now, "updated_at": now}, deep=True
            )
            self._tasks[task_id] = deleted
            logger.debug("Task soft-deleted id=%s", task_id)
            return self._copy(deleted)

    def restore(self, task_id: str) -> Task | None:
        """Clear the tombstone on a soft-deleted task.

        Returns None if the task does not exist or is not currently deleted.
        """
        with self._lock:
            existing = self._tasks.get(task_id)
            if existing is None or existing.deleted_at is None:
                return None
            now = self._stamp(existing.updated_at)
            restored = existing.model_copy(
                update={"deleted_at": None, "updated_at": now}, deep=True
            )
            self._tasks[task_id] = restored
            logger.debug("Task restored id=%s", task_id)
            return self._copy(restored)

    def hard_delete(self, task_id: str) -> bool:
        """Permanently remove a task, deleted or not. Returns True if one was removed."""
        with self._lock:
            removed = self._tasks.pop(task_id, None) is not None
            if removed:
                logger.debug("Task purged id=%s", task_id)
            return removed

    def clear(self) -> None:
        """Drop every record. Issued ids stay reserved."""
        with self._lock:
            self._tasks = {}

    # -- reads ----------------------------------------------------------------

    def find_by_id(self, task_id: str, include_deleted: bool = False) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            if task.deleted_at is not None and not include_deleted:
                return None
            return self._copy(task)

    def find_all(self, query: TaskListQuery) -> TaskPage:
        """Filter, sort and paginate tasks according to *query*."""
        with self._lock:
            candidates = [
                task
                for task in self._tasks.values()
                if (query.include_deleted or task.deleted_at is None)
                and _matches(task, query)
            ]
            ordered = _sorted(candidates, query.sort_by, query.sort_order)

            total = len(ordered)
            total_pages = math.ceil(total / query.limit)
            start = (query.page - 1) * query.limit
            page_items = ordered[start:start + query.limit]

            return TaskPage(
                data=[self._copy(task) for task in page_items],
                pagination=Pagination(
                    page=query.page,
                    limit=query.limit,
                    total=total,
                    total_pages=total_pages,
                    has_next_page=query.page < total_pages,
                    has_prev_page=query.page > 1,
                ),
            )

    def get_stats(self) -> TaskStats:
        """Aggregate counts over live tasks.

        A task is overdue when its due date is strictly in the past and it
        is neither completed nor cancelled.
        """
        with self._lock:
            now = self._clock()
            live = [t for t in self._tasks.values() if t.deleted_at is None]
            by_status = Counter(t.status.value for t in live)
            by_priority = Counter(t.priority.value for t in live)
            overdue = sum(
                1
                for t in live
                if t.due_date is not None
                and t.due_date < now
                and t.status not in TERMINAL_STATUSES
            )
            return TaskStats(
                total=len(live),
                by_status=dict(by_status),
                by_priority=dict(by_priority),
                overdue=overdue,
            )
