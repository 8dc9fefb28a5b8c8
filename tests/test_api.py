from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from src.school_attendance.school_attendance import main
from src.school_attendance.school_attendance.attendance.controller import register as register_attendance
from src.school_attendance.school_attendance.attendance.service import AttendanceService
from src.school_attendance.school_attendance.container import build_container, parse_periods
from src.school_attendance.school_attendance.core.enums import MealType, NutritionTargetGroup, Scope
from src.school_attendance.school_attendance.nutrition.controller import register as register_nutrition
from src.school_attendance.school_attendance.nutrition.model import Ingredient, MealPlan, MealPlanItem
from src.school_attendance.school_attendance.nutrition.service import NutritionService
from src.school_attendance.school_attendance.people.model import Personnel, Student


class FakePeople:
    def list_students(self):
        return [
            Student(student_id=1, title="ด.ช.", name="หนึ่ง", student_class="6/1"),
            Student(student_id=2, title="ด.ญ.", name="สอง", student_class="6/1"),
        ]

    def list_personnel(self):
        return [Personnel(personnel_id=10, title="นาย", name="ครูสิบ")]


class FakeAttendance:
    def __init__(self):
        self.store = {Scope.STUDENT: {}, Scope.PERSONNEL: {}}
        self.down = False

    def list_records(self, scope):
        return list(self.store[scope].values())

    def save_records(self, scope, records):
        if self.down:
            raise TimeoutError("backend timeout")
        for r in records:
            self.store[scope][r.record_id] = r

    def delete_records(self, scope, record_ids):
        return sum(1 for rid in record_ids if self.store[scope].pop(rid, None) is not None)


class FakeNutrition:
    def __init__(self):
        self.ingredients = {1: Ingredient(ingredient_id=1, name="ข้าวสาร", unit="kg", calories=100, price=5)}
        self.plans = {
            1: MealPlan(1, "01/06/2567", NutritionTargetGroup.PRIMARY, "ข้าวผัด", MealType.LUNCH, (MealPlanItem(1, 2),))
        }

    def list_ingredients(self):
        return list(self.ingredients.values())

    def list_meal_plans(self):
        return list(self.plans.values())

    def save_ingredient(self, ingredient):
        self.ingredients[ingredient.ingredient_id] = ingredient

    def delete_ingredients(self, ingredient_ids):
        return sum(1 for i in ingredient_ids if self.ingredients.pop(i, None) is not None)

    def save_meal_plan(self, plan):
        self.plans[plan.plan_id] = plan

    def delete_meal_plans(self, plan_ids):
        return sum(1 for i in plan_ids if self.plans.pop(i, None) is not None)


@pytest.fixture
def attendance_repo():
    return FakeAttendance()


@pytest.fixture
def nutrition_repo():
    return FakeNutrition()


def fake_container(attendance_repo, nutrition_repo):
    people = FakePeople()
    return SimpleNamespace(
        attendance_service=AttendanceService(attendance_repo, people),
        nutrition_service=NutritionService(nutrition_repo, people),
    )


@pytest.fixture
def client(attendance_repo, nutrition_repo):
    container = fake_container(attendance_repo, nutrition_repo)
    app = Flask(__name__)
    register_attendance(app, container)
    register_nutrition(app, container)
    return app.test_client()


def view_state(**extra):
    state = {"scope": "student", "selected_date": "01/06/2567", "selected_period": "p1", "selected_class": "6/1"}
    state.update(extra)
    return state


def test_options_lists_periods_and_classes(client):
    data = client.get("/api/attendance/options").get_json()

    assert data["classes"] == ["6/1"]
    assert data["periods"][0] == {"id": "morning_act", "label": "กิจกรรมเช้า"}
    assert len(data["periods"]) == 9
    assert "activity" not in [s["id"] for s in data["statuses"]["student"]]
    assert {"id": "activity", "label": "กิจกรรม"} in data["statuses"]["personnel"]


def test_checkin_then_history(client):
    resp = client.post("/api/attendance/checkin", json={"view_state": view_state(), "statuses": {"2": "absent"}})
    assert resp.status_code == 200
    assert resp.get_json()["saved"] == 2

    groups = client.post("/api/attendance/history", json={"view_state": view_state()}).get_json()["groups"]
    assert len(groups) == 1
    assert groups[0]["key"] == "01/06/2567-p1-6/1"
    assert groups[0]["present"] == 1
    assert groups[0]["absent"] == 1


def test_checkin_sheet_has_default_statuses(client):
    data = client.post("/api/attendance/checkin-sheet", json={"view_state": view_state()}).get_json()

    assert [p["id"] for p in data["roster"]] == ["1", "2"]
    assert data["statuses"] == {"1": "present", "2": "present"}


def test_failed_save_echoes_submitted_state(client, attendance_repo):
    attendance_repo.down = True

    resp = client.post("/api/attendance/checkin", json={"view_state": view_state(), "statuses": {"1": "sick"}})

    assert resp.status_code == 502
    body = resp.get_json()
    assert body["success"] is False
    assert body["statuses"] == {"1": "sick"}
    assert body["view_state"]["selected_class"] == "6/1"


def test_invalid_status_is_bad_request(client):
    resp = client.post("/api/attendance/checkin", json={"view_state": view_state(), "statuses": {"1": "activity"}})

    assert resp.status_code == 400


def test_unknown_scope_is_bad_request(client):
    assert client.get("/api/attendance/stats?scope=parents").status_code == 400


def test_edit_unknown_group_is_not_found(client):
    resp = client.post("/api/attendance/groups/edit", json={"scope": "student", "key": "nope"})

    assert resp.status_code == 404


def test_delete_groups(client, attendance_repo):
    client.post("/api/attendance/checkin", json={"view_state": view_state(), "statuses": {}})

    resp = client.post("/api/attendance/groups/delete", json={"scope": "student", "keys": ["01/06/2567-p1-6/1"]})

    assert resp.get_json() == {"success": True, "deleted": 2}
    assert attendance_repo.list_records(Scope.STUDENT) == []


def test_export_returns_csv_attachment(client):
    client.post("/api/attendance/checkin", json={"view_state": view_state(), "statuses": {}})

    resp = client.post("/api/attendance/export", json={"view_state": view_state(selected_groups=["01/06/2567-p1-6/1"])})

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment; filename=attendance_report_" in resp.headers["Content-Disposition"]
    assert resp.data.startswith(b"\xef\xbb\xbf")


def test_export_without_selection_is_bad_request(client):
    assert client.post("/api/attendance/export", json={"view_state": view_state()}).status_code == 400


def test_shopping_list_endpoint(client):
    data = client.get("/api/nutrition/shopping-list?date=01/06/2567&student_count=100").get_json()

    assert data["total_cost"] == 1000
    assert data["items"][0]["amount"] == 200


def test_monthly_shopping_list_endpoint(client):
    data = client.get("/api/nutrition/shopping-list?range=month&month=6&year=2567&student_count=1").get_json()

    assert data["plan_count"] == 1


def test_daily_nutrition_rejects_unknown_target_group(client):
    assert client.get("/api/nutrition/daily?date=01/06/2567&target_group=adults").status_code == 400


def test_parse_periods_accepts_tuples_and_dicts():
    periods = parse_periods([("p1", "ชั่วโมงที่ 1", True), {"id": "p2", "enabled": False}])

    assert [(p.period_id, p.label, p.enabled) for p in periods] == [("p1", "ชั่วโมงที่ 1", True), ("p2", "p2", False)]
    assert parse_periods(None) is None


@pytest.mark.parametrize(
    "body",
    [
        {"view_state": ["x"]},
        {"view_state": "student"},
        {"view_state": {"selected_groups": 5}},
        {"view_state": {"selected_groups": {"a": 1}}},
        ["not", "an", "object"],
    ],
)
def test_malformed_view_state_is_bad_request(client, body):
    resp = client.post("/api/attendance/history", json=body)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_ingredient_and_meal_plan_management(client, nutrition_repo):
    resp = client.post("/api/nutrition/ingredients", json={"id": 2, "name": "ไข่ไก่", "unit": "ฟอง", "price": 4})
    assert resp.status_code == 200
    assert resp.get_json()["ingredient"]["price"] == 4.0

    resp = client.post(
        "/api/nutrition/meal-plans",
        json={
            "id": 7,
            "date": "01/06/2567",
            "target_group": "primary",
            "menu_name": "ไข่ต้ม",
            "meal_type": "breakfast",
            "items": [{"ingredient_id": 2, "amount": 1}],
        },
    )
    assert resp.status_code == 200
    assert resp.get_json()["meal_plan"]["items"] == [{"ingredient_id": 2, "amount": 1.0}]

    plans = client.get("/api/nutrition/meal-plans?date=01/06/2567").get_json()["meal_plans"]
    assert sorted(p["id"] for p in plans) == [1, 7]
    assert [i["id"] for i in client.get("/api/nutrition/ingredients").get_json()["ingredients"]] == [1, 2]

    data = client.get("/api/nutrition/shopping-list?date=01/06/2567&student_count=10").get_json()
    assert data["total_cost"] == 10 * 2 * 5 + 10 * 1 * 4

    assert client.post("/api/nutrition/meal-plans/delete", json={"ids": [7]}).get_json() == {"success": True, "deleted": 1}
    assert client.post("/api/nutrition/ingredients/delete", json={"ids": [2]}).get_json() == {"success": True, "deleted": 1}
    assert sorted(nutrition_repo.plans) == [1]
    assert sorted(nutrition_repo.ingredients) == [1]


def test_invalid_meal_plan_is_bad_request(client):
    resp = client.post(
        "/api/nutrition/meal-plans",
        json={"date": "01/06/2567", "target_group": "adults", "menu_name": "x", "meal_type": "lunch"},
    )

    assert resp.status_code == 400


def test_deleting_unknown_ingredient_is_not_found(client):
    assert client.post("/api/nutrition/ingredients/delete", json={"ids": [404]}).status_code == 404


def test_each_container_uses_its_own_database():
    first = build_container(db_config={"database": "school_a"})
    second = build_container(db_config={"database": "school_b"})

    assert first.conn.config.database == "school_a"
    assert second.conn.config.database == "school_b"


def test_create_app_wires_testing_settings(monkeypatch, attendance_repo, nutrition_repo):
    import config.testing as testing_settings

    seen = {}

    def fake_build_container(*, db_config, attendance_periods=None):
        seen["db_config"] = db_config
        return fake_container(attendance_repo, nutrition_repo)

    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(main, "build_container", fake_build_container)
    monkeypatch.setattr(main, "configure_logging", lambda level: seen.setdefault("log_level", level))

    app = main.create_app()

    assert seen["db_config"] is testing_settings.DB_CONFIG
    assert seen["log_level"] == "WARNING"
    assert app.config["DEBUG"] is False
    client = app.test_client()
    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/api/attendance/options").status_code == 200
