from __future__ import annotations

import csv
import io
import logging
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import StorageFailure, ValidationError
from ..ledger.report import REPORT_FIELDS

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _identify(data: dict):
        try:
            outcome = container.identification_service.identify(
                data.get("descriptor"),
                image_ref=data.get("image"),
            )
            return jsonify(outcome.to_response()), 200
        except ValidationError as e:
            return jsonify({"found": False, "message": str(e)}), 400
        except StorageFailure as e:
            logger.error("Identification aborted: %s", e)
            return jsonify({"found": False, "message": "Storage unavailable, please retry"}), 503
        except Exception:
            logger.exception("Unexpected error during identification")
            return jsonify({"found": False, "message": "Internal error"}), 500

    def _enroll(data: dict, *, replace: bool):
        service = container.enrollment_service
        action = service.re_enroll if replace else service.enroll
        try:
            record = action(
                identity_id=data.get("identityId") or data.get("empId"),
                display_name=data.get("displayName") or data.get("name"),
                descriptor=data.get("descriptor"),
                category=data.get("category"),
                department=data.get("department"),
            )
            verb = "Re-enrolled" if replace else "Enrolled"
            return jsonify({
                "status": "ok",
                "message": f"{verb} {record.display_name} ({record.sample_count} sample(s))",
            }), 200
        except ValidationError as e:
            return jsonify({"status": "error", "message": str(e)}), 400
        except StorageFailure as e:
            logger.error("Enrollment aborted: %s", e)
            return jsonify({"status": "error", "message": "Storage unavailable, please retry"}), 503
        except Exception:
            logger.exception("Unexpected error during enrollment")
            return jsonify({"status": "error", "message": "Internal error"}), 500

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        try:
            enrolled = container.enrollment_service.count()
            status = "running"
        except StorageFailure:
            enrolled = None
            status = "degraded"
        return jsonify({
            "status": status,
            "backend": container.backend.value,
            "dimension": container.dimension,
            "threshold": container.matcher.threshold,
            "cooldownSeconds": container.ledger.cooldown.total_seconds(),
            "enrolled": enrolled,
        }), 200

    @app.route("/api/identify", methods=["POST"], endpoint="api_identify")
    def api_identify():
        try:
            data = _json_body()
        except ValidationError as e:
            return jsonify({"found": False, "message": str(e)}), 400
        return _identify(data)

    def _enroll_request(*, replace: bool):
        try:
            data = _json_body()
        except ValidationError as e:
            return jsonify({"status": "error", "message": str(e)}), 400
        return _enroll(data, replace=replace)

    @app.route("/api/enroll", methods=["POST"], endpoint="api_enroll")
    def api_enroll():
        return _enroll_request(replace=request.args.get("mode") == "replace")

    @app.route("/api/exec", methods=["POST"], endpoint="api_exec")
    def api_exec():
        """Single endpoint used by the kiosk page: ?action=register or ?action=mark."""
        action = (request.args.get("action") or "").strip().lower()
        if action == "mark":
            return api_identify()
        if action == "register":
            return _enroll_request(replace=False)
        return jsonify({"status": "error", "message": f"Unknown action: {action or '-'}"}), 400

    @app.route("/api/attendance/<identity_id>", methods=["GET"], endpoint="api_attendance_history")
    def api_attendance_history(identity_id: str):
        try:
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
            events = container.ledger.history(identity_id, limit=limit)
        except ValueError:
            return jsonify({"success": False, "message": "limit must be an integer"}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageFailure:
            return jsonify({"success": False, "message": "Storage unavailable, please retry"}), 503

        return jsonify({
            "success": True,
            "identityId": identity_id,
            "events": [
                {
                    "eventId": e.event_id,
                    "timestamp": e.timestamp.isoformat(),
                    "distance": e.match_distance,
                    "image": e.image_ref,
                }
                for e in events
            ],
        }), 200

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="api_attendance_report_csv")
    def api_attendance_report_csv():
        today = date.today()
        try:
            start = parse_iso_date(request.args.get("start") or today.replace(day=1).strftime("%Y-%m-%d"))
            end = parse_iso_date(request.args.get("end") or today.strftime("%Y-%m-%d"))
            if end < start:
                raise ValidationError("end must not be before start")
            data = container.report_service.build_report(start=start, end=end)
        except ValueError:
            return jsonify({"success": False, "message": "Dates must be YYYY-MM-DD"}), 400
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except StorageFailure:
            return jsonify({"success": False, "message": "Storage unavailable, please retry"}), 503

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        filename = f"attendance_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
