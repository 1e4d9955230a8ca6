"""Loading of plain records into domain models.

Records arrive as JSON-shaped dicts in the same shape as the database
rows (snake_case keys, ``HH:MM[:SS]`` times, ``YYYY-MM-DD`` dates).
Each record kind is described by a strict pydantic row model with a
closed set of fields, so unknown keys, missing keys and mistyped values
are rejected here, at the boundary. Rows are then converted into the
frozen domain dataclasses the engine works on.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shiftcover.domain.errors import InvalidRecord
from shiftcover.domain.models import (
    Assignment,
    Employee,
    Position,
    Schedule,
    ScheduleStatus,
    Shift,
    TimeBasedRequirement,
)
from shiftcover.domain.timewindow import TimeWindow

logger = logging.getLogger(__name__)


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        raise ValueError(f"expected a date without a time of day, got {value!r}")
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    return date.fromisoformat(value)


class RowModel(BaseModel):
    """Base for database row shapes. Audit columns are accepted and ignored."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    created_at: Any = None
    updated_at: Any = None


class EmployeeRow(RowModel):
    id: str
    first_name: str
    last_name: str
    position: Optional[str] = None
    is_active: Optional[bool] = None
    max_weekly_hours: Optional[float] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ShiftRow(RowModel):
    id: str
    name: str
    start_time: str
    end_time: str
    crosses_midnight: Optional[bool] = None
    requires_supervisor: Optional[bool] = None
    duration_hours: Optional[float] = None


class ScheduleRow(RowModel):
    id: str
    start_date: date
    end_date: date
    name: Optional[str] = None
    status: Optional[str] = None
    version: Optional[int] = None
    is_active: Optional[bool] = None
    created_by: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_dates(cls, value: Any) -> date:
        return _to_date(value)


class RequirementRow(RowModel):
    id: str
    schedule_id: str
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    min_employees: int = Field(ge=0)
    crosses_midnight: Optional[bool] = None
    max_employees: Optional[int] = None
    min_supervisors: Optional[int] = None


class AssignmentRow(RowModel):
    id: str
    schedule_id: str
    employee_id: Optional[str]
    shift_id: Optional[str]
    date: date
    is_supervisor_shift: Optional[bool] = None
    overtime_hours: Optional[float] = None
    overtime_status: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any):
        return _to_date(value)


class DatasetPayload(BaseModel):
    """Top-level shape of a dataset file. Rows are validated one by one."""

    model_config = ConfigDict(extra="forbid", strict=True)

    schedule: dict[str, Any]
    employees: list[dict[str, Any]] = Field(default_factory=list)
    shifts: list[dict[str, Any]] = Field(default_factory=list)
    requirements: list[dict[str, Any]] = Field(default_factory=list)
    assignments: list[dict[str, Any]] = Field(default_factory=list)


def _describe(kind: str, exc: ValidationError) -> str:
    """Summarize a pydantic error as one line naming the offending fields."""
    missing, unknown, other = [], [], []
    for error in exc.errors():
        name = ".".join(str(part) for part in error["loc"]) or "record"
        if error["type"] == "missing":
            missing.append(name)
        elif error["type"] == "extra_forbidden":
            unknown.append(name)
        else:
            other.append(f"{name}: {error['msg']}")

    if missing:
        return f"{kind} record is missing fields: {', '.join(sorted(missing))}"
    if unknown:
        return f"{kind} record has unknown fields: {', '.join(sorted(unknown))}"
    return f"{kind} record is invalid: {'; '.join(other)}"


def _validate_row(row_model: type, kind: str, record: Any):
    try:
        return row_model.model_validate(record)
    except ValidationError as exc:
        raise InvalidRecord(_describe(kind, exc)) from exc


def _window(row: Union[ShiftRow, RequirementRow]) -> TimeWindow:
    return TimeWindow.parse(row.start_time, row.end_time, row.crosses_midnight)


def employee_from_dict(record: dict) -> Employee:
    """Build an Employee from a row dict."""
    row = _validate_row(EmployeeRow, "Employee", record)
    position_value = row.position or Position.DISPATCHER.value
    try:
        position = Position(position_value)
    except ValueError:
        raise InvalidRecord(f"Employee {row.id}: unknown position {position_value!r}")

    return Employee(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        position=position,
        is_active=True if row.is_active is None else row.is_active,
        max_weekly_hours=row.max_weekly_hours,
    )


def shift_from_dict(record: dict) -> Shift:
    """Build a Shift from a row dict."""
    row = _validate_row(ShiftRow, "Shift", record)
    return Shift(
        id=row.id,
        name=row.name,
        window=_window(row),
        requires_supervisor=bool(row.requires_supervisor),
        duration_hours=row.duration_hours,
    )


def schedule_from_dict(record: dict) -> Schedule:
    """Build a Schedule from a row dict."""
    row = _validate_row(ScheduleRow, "Schedule", record)
    status_value = row.status or ScheduleStatus.DRAFT.value
    try:
        status = ScheduleStatus(status_value)
    except ValueError:
        raise InvalidRecord(f"Schedule {row.id}: unknown status {status_value!r}")

    return Schedule(
        id=row.id,
        start_date=row.start_date,
        end_date=row.end_date,
        name=row.name or "",
        status=status,
    )


def requirement_from_dict(record: dict) -> TimeBasedRequirement:
    """Build a TimeBasedRequirement from a row dict."""
    row = _validate_row(RequirementRow, "Requirement", record)
    return TimeBasedRequirement(
        id=row.id,
        schedule_id=row.schedule_id,
        day_of_week=row.day_of_week,
        window=_window(row),
        min_employees=row.min_employees,
        max_employees=row.max_employees,
        min_supervisors=row.min_supervisors or 0,
    )


def assignment_from_dict(record: dict) -> Assignment:
    """Build an Assignment from a row dict."""
    row = _validate_row(AssignmentRow, "Assignment", record)
    return Assignment(
        id=row.id,
        schedule_id=row.schedule_id,
        employee_id=row.employee_id,
        shift_id=row.shift_id,
        date=row.date,
        is_supervisor_shift=bool(row.is_supervisor_shift),
    )


@dataclass
class ScheduleDataset:
    """Everything needed to validate one schedule.

    Attributes:
        schedule: The schedule and its date range.
        employees: Employees that may appear in assignments.
        shifts: Shift templates referenced by assignments.
        requirements: Time-based requirements of the schedule.
        assignments: Assignments of the schedule.
    """

    schedule: Schedule
    employees: list[Employee] = field(default_factory=list)
    shifts: list[Shift] = field(default_factory=list)
    requirements: list[TimeBasedRequirement] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)

    @property
    def shifts_by_id(self) -> dict[str, Shift]:
        return {s.id: s for s in self.shifts}

    @property
    def employees_by_id(self) -> dict[str, Employee]:
        return {e.id: e for e in self.employees}

    @classmethod
    def from_dict(cls, payload: dict) -> "ScheduleDataset":
        """Build a dataset from a JSON-shaped payload.

        Raises:
            InvalidRecord: On the first malformed record.
            InvalidTimeFormat: On a malformed time string.
            InvalidWindow: On a window with no positive span.
        """
        rows = _validate_row(DatasetPayload, "Dataset", payload)
        dataset = cls(
            schedule=schedule_from_dict(rows.schedule),
            employees=[employee_from_dict(r) for r in rows.employees],
            shifts=[shift_from_dict(r) for r in rows.shifts],
            requirements=[requirement_from_dict(r) for r in rows.requirements],
            assignments=[assignment_from_dict(r) for r in rows.assignments],
        )
        logger.debug(
            "Loaded schedule %s: %d employees, %d shifts, %d requirements, %d assignments",
            dataset.schedule.id,
            len(dataset.employees),
            len(dataset.shifts),
            len(dataset.requirements),
            len(dataset.assignments),
        )
        return dataset


def load_dataset(path: Union[str, Path]) -> ScheduleDataset:
    """Read a dataset from a JSON file."""
    try:
        payload = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise InvalidRecord(f"{path} is not valid JSON: {exc}") from exc
    return ScheduleDataset.from_dict(payload)
