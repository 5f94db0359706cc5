from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import duration_hours, parse_iso_date, parse_time_of_day
from ..common.validators import require_bool, require_non_negative
from ..container import Container
from ..core.constants import DEFAULT_ENTRY_CATEGORY
from ..core.enums import DeadlineKind, RecurrenceKind, Weekday
from ..core.exceptions import ConfigurationError, ValidationError
from ..recurrence.model import RecurrenceRule
from .model import ScheduleEntryDraft


def _require(payload: dict, key: str):
    value = payload.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(f"{key} is required")
    return value


def _int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def _optional_int(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return _int(value, field_name)


def _optional_date(value) -> Optional[date]:
    return parse_iso_date(value) if value else None


def _parse_deadline(value) -> Optional[date | datetime]:
    if not value:
        return None
    text = str(value).strip()
    if len(text) == 10:
        return parse_iso_date(text)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid deadline: {value!r}")


def draft_from_payload(payload: dict) -> ScheduleEntryDraft:
    start_time = parse_time_of_day(_require(payload, "start_time"))
    end_time = parse_time_of_day(_require(payload, "end_time"))
    planned_hours = duration_hours(start_time, end_time)
    if payload.get("planned_hours") is not None:
        planned_hours = require_non_negative(payload["planned_hours"], "planned_hours")
    return ScheduleEntryDraft(
        owner_id=_int(_require(payload, "owner_id"), "owner_id"),
        scope_id=_int(_require(payload, "scope_id"), "scope_id"),
        occurrence_date=parse_iso_date(str(_require(payload, "occurrence_date"))),
        start_time=start_time,
        end_time=end_time,
        label=str(_require(payload, "label")).strip(),
        planned_hours=planned_hours,
        category=payload.get("category") or DEFAULT_ENTRY_CATEGORY,
        task_id=_optional_int(payload.get("task_id"), "task_id"),
        deadline=_parse_deadline(payload.get("deadline")),
        deadline_kind=DeadlineKind.parse(payload.get("deadline_kind")),
        deadline_reason=payload.get("deadline_reason"),
        assigned_by_admin=require_bool(payload.get("assigned_by_admin", False), "assigned_by_admin"),
    )


def rule_from_payload(payload: dict) -> RecurrenceRule:
    try:
        kind = RecurrenceKind(str(payload.get("kind") or RecurrenceKind.DAILY.value).lower())
        weekdays = frozenset(Weekday(int(d)) for d in payload.get("weekdays") or [])
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid recurrence rule: {payload!r}")
    return RecurrenceRule(
        kind=kind,
        interval=_int(payload.get("interval", 1), "interval"),
        weekdays=weekdays,
        end_date=_optional_date(payload.get("end_date")),
        max_count=_optional_int(payload.get("max_count"), "max_count"),
    )


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/entries", methods=["GET"], endpoint="entries_list")
    def entries_list():
        entries = service.list_entries(
            scope_id=_optional_int(request.args.get("scope_id"), "scope_id"),
            owner_id=_optional_int(request.args.get("owner_id"), "owner_id"),
            start=_optional_date(request.args.get("start")),
            end=_optional_date(request.args.get("end")),
        )
        return jsonify([e.to_dict() for e in entries])

    @app.route("/api/entries", methods=["POST"], endpoint="entries_create")
    def entries_create():
        payload = _payload()
        draft = draft_from_payload(payload)
        if payload.get("recurrence"):
            result = service.create_recurring_series(draft, rule_from_payload(payload["recurrence"]))
            return jsonify(result.to_dict()), 201
        return jsonify(service.create_entry(draft).to_dict()), 201

    @app.route("/api/entries/split", methods=["POST"], endpoint="entries_split")
    def entries_split():
        payload = _payload()
        parts = payload.get("hours_per_part")
        if parts is not None and not isinstance(parts, list):
            raise ValidationError("hours_per_part must be a list")
        hours = [require_non_negative(h, "hours_per_part") for h in parts] if parts else None
        result = service.split_task(draft_from_payload(payload), hours)
        return jsonify(result.to_dict()), 201

    @app.route("/api/entries/<int:entry_id>", methods=["GET"], endpoint="entries_get")
    def entries_get(entry_id: int):
        return jsonify(service.get_entry(entry_id).to_dict())

    @app.route("/api/entries/<int:entry_id>", methods=["DELETE"], endpoint="entries_delete")
    def entries_delete(entry_id: int):
        return jsonify(service.delete_entry(entry_id).to_dict())

    @app.route("/api/entries/<int:entry_id>/status", methods=["PATCH"], endpoint="entries_status")
    def entries_status(entry_id: int):
        status = _require(_payload(), "status")
        return jsonify(service.update_status(entry_id, status).to_dict())

    @app.route("/api/entries/<int:entry_id>/pause", methods=["POST"], endpoint="entries_pause")
    def entries_pause(entry_id: int):
        return jsonify(service.pause(entry_id).to_dict())

    @app.route("/api/entries/<int:entry_id>/resume", methods=["POST"], endpoint="entries_resume")
    def entries_resume(entry_id: int):
        return jsonify(service.resume(entry_id).to_dict())

    @app.route("/api/entries/<int:entry_id>/actual-hours", methods=["PATCH"], endpoint="entries_actual_hours")
    def entries_actual_hours(entry_id: int):
        hours = _require(_payload(), "actual_hours")
        return jsonify(service.correct_actual_hours(entry_id, hours).to_dict())

    @app.route("/api/entries/<int:entry_id>/planned-hours", methods=["PATCH"], endpoint="entries_planned_hours")
    def entries_planned_hours(entry_id: int):
        hours = _require(_payload(), "planned_hours")
        return jsonify(service.resize_split_part(entry_id, hours).to_dict())

    @app.route("/api/entries/<int:entry_id>/deadline", methods=["GET"], endpoint="entries_deadline")
    def entries_deadline(entry_id: int):
        return jsonify(service.deadline_status(entry_id).to_dict())
