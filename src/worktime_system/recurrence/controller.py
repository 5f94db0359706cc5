from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, resolve_zone, today_in_zone
from ..common.validators import require_bool, require_positive_int
from ..container import Container
from ..core.exceptions import ConfigurationError, ValidationError
from .model import DateWindow


def register(app: Flask, container: Container) -> None:
    configs = container.recurrence_service
    schedules = container.schedule_service

    def _window(source: dict) -> DateWindow:
        # A single "date" is shorthand for a one-day window.
        if source.get("date"):
            day = parse_iso_date(source["date"])
            return DateWindow(day, day)
        if not source.get("start") or not source.get("end"):
            raise ConfigurationError("start and end dates are required")
        return DateWindow(parse_iso_date(source["start"]), parse_iso_date(source["end"]))

    def _owners(value) -> list[int]:
        if not isinstance(value, list):
            raise ValidationError("owners must be a list of ids")
        try:
            return [int(v) for v in value]
        except (TypeError, ValueError):
            raise ValidationError("owners must be a list of ids")

    @app.route("/api/scopes/<int:scope_id>/recurrence", methods=["GET"], endpoint="recurrence_get")
    def recurrence_get(scope_id: int):
        return jsonify(configs.get(scope_id).to_dict())

    @app.route("/api/scopes/<int:scope_id>/recurrence", methods=["PUT", "PATCH"], endpoint="recurrence_update")
    def recurrence_update(scope_id: int):
        payload = request.get_json(silent=True) or {}
        updated = configs.update(
            scope_id,
            start_time=payload.get("start_time"),
            end_time=payload.get("end_time"),
            label=payload.get("label"),
            category=payload.get("category"),
            weekdays=payload.get("weekdays"),
            enabled=payload.get("enabled"),
        )
        return jsonify(updated.to_dict())

    @app.route("/api/scopes/<int:scope_id>/recurrence/generate", methods=["POST"], endpoint="recurrence_generate")
    def recurrence_generate(scope_id: int):
        payload = request.get_json(silent=True) or {}
        if not payload.get("date") and not payload.get("start") and payload.get("days"):
            # Rolling window starting today, e.g. {"days": 30}.
            days = require_positive_int(payload["days"], "days")
            start = today_in_zone(None, resolve_zone(container.reference_tz))
            window = DateWindow(start, start + timedelta(days=days - 1))
        else:
            window = _window(payload)

        result = schedules.reconcile_standups(
            scope_id=scope_id,
            window=window,
            owners=_owners(payload.get("owners", [])),
            per_owner=require_bool(payload.get("per_owner", False), "per_owner"),
        )
        return jsonify(result.to_dict())

    @app.route("/api/scopes/<int:scope_id>/standups", methods=["DELETE"], endpoint="recurrence_delete_standups")
    def recurrence_delete_standups(scope_id: int):
        deleted = schedules.delete_standups(
            scope_id=scope_id,
            window=_window(request.args),
            label=request.args.get("label") or None,
        )
        return jsonify({"deleted": deleted})
