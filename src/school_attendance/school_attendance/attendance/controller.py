from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http_errors import json_body, json_errors
from ..core.constants import STATUS_LABELS
from ..core.enums import Scope
from ..core.exceptions import SaveError, ValidationError
from ..container import Container
from ..people.model import Person, Student
from .model import ViewState


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _view_state(data: dict) -> ViewState:
        raw = data.get("view_state") or {}
        if not isinstance(raw, dict):
            raise ValidationError("รูปแบบสถานะหน้าจอไม่ถูกต้อง")
        return ViewState.from_dict(raw)

    def _scope(value) -> Scope:
        try:
            return Scope(str(value or Scope.STUDENT.value))
        except ValueError:
            raise ValidationError("ขอบเขตการเช็คชื่อไม่ถูกต้อง")

    def _statuses(data: dict) -> dict:
        statuses = data.get("statuses") or {}
        if not isinstance(statuses, dict):
            raise ValidationError("รูปแบบสถานะไม่ถูกต้อง")
        return {str(k): v for k, v in statuses.items()}

    def _person(p: Person) -> dict:
        row = {"id": p.subject_id, "name": p.display_name}
        if isinstance(p, Student):
            row.update({"class": p.student_class, "nickname": p.nickname})
        else:
            row.update({"position": p.position})
        return row

    @app.route("/api/attendance/options", methods=["GET"], endpoint="attendance_options")
    @json_errors
    def attendance_options():
        return jsonify(
            {
                "periods": [{"id": p.period_id, "label": p.label} for p in service.periods],
                "classes": service.class_options(),
                "statuses": {
                    scope.value: [{"id": s.value, "label": STATUS_LABELS[s]} for s in service.allowed_statuses(scope)]
                    for scope in Scope
                },
            }
        )

    @app.route("/api/attendance/history", methods=["POST"], endpoint="attendance_history")
    @json_errors
    def attendance_history():
        view_state = _view_state(json_body())
        groups = service.history(view_state)
        return jsonify({"view_state": view_state.to_dict(), "groups": [g.to_dict() for g in groups]})

    @app.route("/api/attendance/history/select-all", methods=["POST"], endpoint="attendance_select_all")
    @json_errors
    def attendance_select_all():
        data = json_body()
        view_state = _view_state(data)
        if data.get("checked", True):
            view_state = service.select_all_filtered(view_state)
        else:
            view_state = view_state.clear_selection()
        return jsonify({"view_state": view_state.to_dict()})

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @json_errors
    def attendance_stats():
        scope = _scope(request.args.get("scope"))
        date = request.args.get("date") or ViewState.initial(scope).selected_date
        return jsonify(service.daily_stats(scope, date))

    @app.route("/api/attendance/checkin-sheet", methods=["POST"], endpoint="attendance_checkin_sheet")
    @json_errors
    def attendance_checkin_sheet():
        sheet = service.checkin_sheet(_view_state(json_body()))
        return jsonify(
            {
                "view_state": sheet.view_state.to_dict(),
                "roster": [_person(p) for p in sheet.roster],
                "statuses": dict(sheet.statuses),
            }
        )

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @json_errors
    def attendance_checkin():
        data = json_body()
        view_state = _view_state(data)
        statuses = _statuses(data)
        try:
            records = service.save_session(view_state, statuses)
        except SaveError as e:
            e.echo = {"view_state": view_state.to_dict(), "statuses": statuses}
            raise
        return jsonify({"success": True, "message": "บันทึกข้อมูลเรียบร้อย", "saved": len(records)})

    @app.route("/api/attendance/groups/edit", methods=["POST"], endpoint="attendance_group_edit")
    @json_errors
    def attendance_group_edit():
        data = json_body()
        session = service.open_group_for_edit(_scope(data.get("scope")), str(data.get("key") or ""))
        return jsonify(
            {
                "date": session.date,
                "period": session.period,
                "group_label": session.group_label,
                "roster": [_person(p) for p in session.roster],
                "statuses": dict(session.statuses),
            }
        )

    @app.route("/api/attendance/groups/save", methods=["POST"], endpoint="attendance_group_save")
    @json_errors
    def attendance_group_save():
        data = json_body()
        statuses = _statuses(data)
        try:
            records = service.save_group_edit(
                _scope(data.get("scope")),
                date=str(data.get("date") or ""),
                period=str(data.get("period") or ""),
                group_label=str(data.get("group_label") or ""),
                statuses=statuses,
            )
        except SaveError as e:
            e.echo = {"statuses": statuses}
            raise
        return jsonify({"success": True, "message": "บันทึกข้อมูลเรียบร้อย", "saved": len(records)})

    @app.route("/api/attendance/groups/delete", methods=["POST"], endpoint="attendance_group_delete")
    @json_errors
    def attendance_group_delete():
        data = json_body()
        keys = data.get("keys") or []
        if not isinstance(keys, list):
            raise ValidationError("รูปแบบรายการไม่ถูกต้อง")
        deleted = service.delete_groups(_scope(data.get("scope")), [str(k) for k in keys])
        return jsonify({"success": True, "deleted": deleted})

    @app.route("/api/attendance/export", methods=["POST"], endpoint="attendance_export")
    @json_errors
    def attendance_export():
        filename, content = service.export_csv(_view_state(json_body()))
        return app.response_class(
            content,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
