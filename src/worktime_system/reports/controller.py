from __future__ import annotations

from flask import Flask, Response, jsonify, request

from ..common.datetime_utils import parse_iso_date, week_start_of
from ..container import Container
from ..core.exceptions import ConfigurationError, ValidationError
from .export import EXPORT_MIMETYPES, export_weekly_report
from .model import WeeklyReport


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _report() -> WeeklyReport:
        owner_s = request.args.get("owner_id")
        if not owner_s:
            raise ConfigurationError("owner_id is required")
        if not owner_s.isdigit():
            raise ValidationError("owner_id must be an integer")
        scope_s = request.args.get("scope_id")
        if scope_s and not scope_s.isdigit():
            raise ValidationError("scope_id must be an integer")

        # "week_start" is taken as is; "date" snaps to the Monday of its week.
        if request.args.get("week_start"):
            week_start = parse_iso_date(request.args["week_start"])
        elif request.args.get("date"):
            week_start = week_start_of(parse_iso_date(request.args["date"]))
        else:
            raise ConfigurationError("week_start or date is required")

        return service.weekly_report(
            owner_id=int(owner_s),
            week_start=week_start,
            scope_id=int(scope_s) if scope_s else None,
        )

    @app.route("/api/reports/weekly", methods=["GET"], endpoint="reports_weekly")
    def reports_weekly():
        return jsonify(_report().to_dict())

    @app.route("/api/reports/weekly/export", methods=["GET"], endpoint="reports_weekly_export")
    def reports_weekly_export():
        fmt = (request.args.get("format") or "xlsx").lower()
        report = _report()
        content = export_weekly_report(report, fmt)
        filename = f"weekly_report_{report.owner_id}_{report.week_start.isoformat()}.{fmt}"
        return Response(
            content,
            mimetype=EXPORT_MIMETYPES[fmt],
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
