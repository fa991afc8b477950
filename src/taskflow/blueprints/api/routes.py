"""JSON API routes."""

from __future__ import annotations

from datetime import date

from flask import jsonify, request
from pydantic import ValidationError as FormValidationError

from ...domain.records import Habit
from ...errors import RecordNotFound, ValidationError
from ...extensions import get_repository
from ...logging_config import get_logger
from ...services.cadence import to_calendar_day
from ...services.habits import rank_habits, set_daily_status, toggle_completion
from ...services.schedule import collect_tags, day_summary, month_grid
from . import bp
from .forms import DailyStatusForm, DayForm, form_errors, parse_record
from .serializers import habit_overview, record_to_dict, summary_to_dict

logger = get_logger(__name__)


@bp.errorhandler(FormValidationError)
def _form_invalid(exc: FormValidationError):
    return jsonify({"errors": form_errors(exc)}), 400


@bp.errorhandler(ValidationError)
def _record_invalid(exc: ValidationError):
    logger.warning("Rejected invalid value", extra={"field": exc.field, "value": exc.value})
    return jsonify({"errors": {exc.field: [str(exc)]}}), 400


@bp.errorhandler(RecordNotFound)
def _not_found(exc: RecordNotFound):
    return jsonify({"errors": {"id": [str(exc)]}}), 404


def _payload() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _get_habit(record_id: str) -> Habit:
    record = get_repository().get_by_id(record_id)
    if not isinstance(record, Habit):
        raise ValidationError("id", record_id, f"Record {record_id!r} is not a habit")
    return record


def _today() -> date:
    raw = request.args.get("today")
    return to_calendar_day(raw, field="today") if raw else date.today()


@bp.get("/tasks")
def list_tasks():
    """List every task and habit."""

    records = get_repository().list_all()
    return jsonify(
        {"records": [record_to_dict(r) for r in records], "tags": collect_tags(records)}
    )


@bp.post("/tasks")
def create_task():
    """Create a task, or a habit when ``is_habit`` is true."""

    payload = _payload()
    record = get_repository().add(parse_record(payload, record_id=str(payload.get("id") or "")))
    return jsonify(record_to_dict(record)), 201


@bp.get("/tasks/<record_id>")
def get_task(record_id: str):
    return jsonify(record_to_dict(get_repository().get_by_id(record_id)))


@bp.put("/tasks/<record_id>")
def update_task(record_id: str):
    """Replace a record; habits keep their completion history."""

    repo = get_repository()
    existing = repo.get_by_id(record_id)
    record = repo.update(parse_record(_payload(), record_id=record_id, existing=existing))
    return jsonify(record_to_dict(record))


@bp.delete("/tasks/<record_id>")
def delete_task(record_id: str):
    get_repository().delete(record_id)
    return "", 204


@bp.get("/calendar/<day>")
def calendar_day(day: str):
    """Events and completion badges for one day."""

    summary = day_summary(get_repository().list_all(), to_calendar_day(day, field="day"))
    return jsonify(summary_to_dict(summary))


@bp.get("/calendar/month/<month>")
def calendar_month(month: str):
    """Day summaries for the weeks covering ``YYYY-MM``."""

    anchor = to_calendar_day(f"{month}-01", field="month")
    grid = month_grid(get_repository().list_all(), anchor)
    return jsonify(
        {
            "month": anchor.strftime("%Y-%m"),
            "days": [summary_to_dict(summary, include_events=False) for summary in grid],
        }
    )


@bp.get("/habits")
def list_habits():
    """Habits ranked by priority and current streak."""

    today = _today()
    habits = [r for r in get_repository().list_all() if isinstance(r, Habit)]
    return jsonify(
        {
            "today": today.isoformat(),
            "habits": [habit_overview(h, today) for h in rank_habits(habits, today=today)],
        }
    )


@bp.post("/habits/<record_id>/toggle")
def toggle_habit(record_id: str):
    """Mark a habit complete for a day, or undo it."""

    form = DayForm.model_validate(_payload())
    habit = toggle_completion(_get_habit(record_id), form.day())
    get_repository().update(habit)
    logger.info("Habit toggled", extra={"record_id": record_id, "day": form.day().isoformat()})
    return jsonify(habit_overview(habit, _today()))


@bp.put("/habits/<record_id>/status")
def set_habit_status(record_id: str):
    """Record the qualitative status of a habit for a day."""

    form = DailyStatusForm.model_validate(_payload())
    habit = set_daily_status(_get_habit(record_id), form.day(), form.status)
    get_repository().update(habit)
    return jsonify(habit_overview(habit, _today()))
