from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import buddhist_month_year, current_buddhist_date
from ..common.http_errors import json_body, json_errors
from ..core.enums import NutritionTargetGroup
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.nutrition_service

    def _int_arg(name: str, default: int) -> int:
        raw = request.args.get(name)
        if raw is None or raw == "":
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValidationError(f"{name} ต้องเป็นตัวเลข")

    @app.route("/api/nutrition/shopping-list", methods=["GET"], endpoint="nutrition_shopping_list")
    @json_errors
    def nutrition_shopping_list():
        date = request.args.get("date") or current_buddhist_date()
        student_count = request.args.get("student_count")

        if request.args.get("range", "day") == "month":
            month, year = buddhist_month_year(date) or buddhist_month_year(current_buddhist_date())
            report = service.monthly_shopping_list(
                _int_arg("month", month),
                _int_arg("year", year),
                student_count=student_count,
            )
        else:
            report = service.daily_shopping_list(date, student_count=student_count)
        return jsonify(report.to_dict())

    @app.route("/api/nutrition/daily", methods=["GET"], endpoint="nutrition_daily")
    @json_errors
    def nutrition_daily():
        date = request.args.get("date") or current_buddhist_date()
        try:
            target_group = NutritionTargetGroup(request.args.get("target_group") or NutritionTargetGroup.PRIMARY.value)
        except ValueError:
            raise ValidationError("กลุ่มเป้าหมายไม่ถูกต้อง")
        return jsonify(service.daily_nutrition(date, target_group).to_dict())

    def _ids(data: dict) -> list:
        ids = data.get("ids") or []
        if not isinstance(ids, list):
            raise ValidationError("รูปแบบรายการไม่ถูกต้อง")
        return ids

    @app.route("/api/nutrition/ingredients", methods=["GET"], endpoint="nutrition_ingredients")
    @json_errors
    def nutrition_ingredients():
        return jsonify({"ingredients": [i.to_dict() for i in service.list_ingredients()]})

    @app.route("/api/nutrition/ingredients", methods=["POST"], endpoint="nutrition_ingredient_save")
    @json_errors
    def nutrition_ingredient_save():
        ingredient = service.save_ingredient(json_body())
        return jsonify({"success": True, "ingredient": ingredient.to_dict()})

    @app.route("/api/nutrition/ingredients/delete", methods=["POST"], endpoint="nutrition_ingredient_delete")
    @json_errors
    def nutrition_ingredient_delete():
        return jsonify({"success": True, "deleted": service.delete_ingredients(_ids(json_body()))})

    @app.route("/api/nutrition/meal-plans", methods=["GET"], endpoint="nutrition_meal_plans")
    @json_errors
    def nutrition_meal_plans():
        plans = service.list_meal_plans(date=request.args.get("date") or None)
        return jsonify({"meal_plans": [p.to_dict() for p in plans]})

    @app.route("/api/nutrition/meal-plans", methods=["POST"], endpoint="nutrition_meal_plan_save")
    @json_errors
    def nutrition_meal_plan_save():
        plan = service.save_meal_plan(json_body())
        return jsonify({"success": True, "meal_plan": plan.to_dict()})

    @app.route("/api/nutrition/meal-plans/delete", methods=["POST"], endpoint="nutrition_meal_plan_delete")
    @json_errors
    def nutrition_meal_plan_delete():
        return jsonify({"success": True, "deleted": service.delete_meal_plans(_ids(json_body()))})
