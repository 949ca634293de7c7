# src/tasktime/scheduling/slot_assigner.py

"""
Recurring-task -> cron slot assignment.

Each recurring task gets a base slot from its deadline:
- minute/hour from the deadline time of day,
- day-of-month for monthly tasks, weekday for weekly tasks,
- everything else wildcarded.

Tasks are processed by deadline (then id), so earlier deadlines pick first.
When two tasks want the same slot, the more urgent one keeps it and the other
walks forward minute by minute (wrapping within the hour, then into the next
hour) until it finds a free slot or one held by a less urgent task, which it
displaces in turn.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..errors import SlotExhaustedError
from ..tasks.task_models import Recurrence, Task, parse_deadline

logger = logging.getLogger(__name__)

WILDCARD = "*"
MINUTES_PER_DAY = 24 * 60

SlotKey = tuple[str, str, str, str, str]


class PriorityOrder(StrEnum):
    """Which numeric direction counts as more urgent in a slot collision."""

    HIGHER_WINS = "higher_wins"
    LOWER_WINS = "lower_wins"

    def outranks(self, a: int, b: int) -> bool:
        """True if priority `a` is strictly more urgent than `b`."""
        if self == PriorityOrder.HIGHER_WINS:
            return a > b
        return a < b


@dataclass(slots=True, frozen=True)
class Slot:
    minute: int
    hour: int
    day_of_month: str = WILDCARD
    month: str = WILDCARD
    weekday: str = WILDCARD

    def walk(self, step: int) -> Slot:
        """
        The step-th candidate when walking forward from this slot.

        Minutes wrap modulo 60 inside the starting hour; after a full lap the walk
        moves on to the next hour (wrapping at midnight), so steps 0..1439 visit
        every minute of the day exactly once.
        """
        return Slot(
            minute=(self.minute + step) % 60,
            hour=(self.hour + step // 60) % 24,
            day_of_month=self.day_of_month,
            month=self.month,
            weekday=self.weekday,
        )

    @property
    def key(self) -> SlotKey:
        return (str(self.minute), str(self.hour), self.day_of_month, self.month, self.weekday)

    def to_cron(self) -> str:
        return " ".join(self.key)


@dataclass(slots=True, frozen=True)
class JobEntry:
    slot: Slot
    task_id: int
    command: str
    priority: int


def _deadline_of(task: Task) -> datetime:
    deadline = task.deadline
    if isinstance(deadline, str):
        return parse_deadline(deadline)
    if not isinstance(deadline, datetime):
        raise TypeError(f"deadline must be a datetime, got {type(deadline).__name__}")
    return deadline


def base_slot(task: Task) -> Slot:
    deadline = _deadline_of(task)
    if task.recurrence == Recurrence.MONTHLY:
        return Slot(minute=deadline.minute, hour=deadline.hour, day_of_month=str(deadline.day))
    if task.recurrence == Recurrence.WEEKLY:
        # cron weekday numbering: Sunday = 0
        return Slot(minute=deadline.minute, hour=deadline.hour, weekday=str(deadline.isoweekday() % 7))
    return Slot(minute=deadline.minute, hour=deadline.hour)


def default_command(task: Task) -> str:
    return f"tasktime remind {task.id}"


def assign_slots(
    tasks: Iterable[Task],
    *,
    command_for: Callable[[Task], str] = default_command,
    order: PriorityOrder = PriorityOrder.HIGHER_WINS,
) -> list[JobEntry]:
    """
    Map every recurring task to a distinct cron slot.

    Deterministic for the same task set. Tasks whose base slot cannot be derived
    are skipped with a warning; the rest are still scheduled.
    """
    eligible: list[tuple[Task, datetime, Slot]] = []
    for task in tasks:
        if not task.is_recurring:
            continue
        try:
            deadline = _deadline_of(task)
            slot = base_slot(task)
        except (TypeError, ValueError):
            logger.warning("Task %s: cannot derive a slot from deadline %r; skipping", task.id, task.deadline)
            continue
        eligible.append((task, deadline, slot))

    eligible.sort(key=lambda item: (item[1], item[0].id))

    claims: dict[SlotKey, _Claim] = {}
    for task, _, slot in eligible:
        _place(_Claim(task=task, origin=slot, step=0), claims, order)
    final = {claim.task.id: claim.slot for claim in claims.values()}

    entries = [
        JobEntry(slot=final[task.id], task_id=task.id, command=command_for(task), priority=task.priority)
        for task, _, _ in eligible
    ]
    logger.info("Assigned %d recurring task(s) to cron slots", len(entries))
    return entries


@dataclass(slots=True, frozen=True)
class _Claim:
    task: Task
    origin: Slot
    step: int

    @property
    def slot(self) -> Slot:
        return self.origin.walk(self.step)


def _place(claim: _Claim, claims: dict[SlotKey, _Claim], order: PriorityOrder) -> None:
    # A displaced task resumes its own walk one step past the slot it lost.
    # Only strictly less urgent tasks are ever displaced, so the chain ends.
    current: _Claim | None = claim
    while current is not None:
        if current.step >= MINUTES_PER_DAY:
            raise SlotExhaustedError(
                f"Task {current.task.id}: every minute of the day is taken for "
                f"day-of-month={current.origin.day_of_month} weekday={current.origin.weekday}"
            )
        key = current.slot.key
        holder = claims.get(key)
        if holder is None:
            claims[key] = current
            current = None
        elif order.outranks(current.task.priority, holder.task.priority):
            logger.debug(
                "Slot %s: task %s (priority %s) displaces task %s (priority %s)",
                current.slot.to_cron(),
                current.task.id,
                current.task.priority,
                holder.task.id,
                holder.task.priority,
            )
            claims[key] = current
            current = _Claim(task=holder.task, origin=holder.origin, step=holder.step + 1)
        else:
            current = _Claim(task=current.task, origin=current.origin, step=current.step + 1)
