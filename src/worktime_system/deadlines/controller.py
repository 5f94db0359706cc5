from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, resolve_zone, today_in_zone
from ..common.validators import require_non_negative
from ..container import Container
from ..core.enums import TaskPriority
from ..core.exceptions import ConfigurationError, ValidationError
from .planner import calculate_deadline


def register(app: Flask, container: Container) -> None:
    @app.route("/api/deadlines/plan", methods=["GET"], endpoint="deadlines_plan")
    def deadlines_plan():
        hours = request.args.get("hours")
        if not hours:
            raise ConfigurationError("hours is required")
        if request.args.get("start"):
            start = parse_iso_date(request.args["start"])
        else:
            start = today_in_zone(None, resolve_zone(container.reference_tz))
        try:
            priority = TaskPriority((request.args.get("priority") or TaskPriority.MEDIUM.value).lower())
        except ValueError:
            raise ValidationError(f"Unknown priority: {request.args.get('priority')!r}")

        plan = calculate_deadline(start, require_non_negative(hours, "hours"), priority=priority)
        return jsonify(plan.to_dict())
