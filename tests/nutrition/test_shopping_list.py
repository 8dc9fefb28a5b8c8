from __future__ import annotations

import pytest

from src.school_attendance.school_attendance.core.enums import MealType, NutritionTargetGroup
from src.school_attendance.school_attendance.nutrition.model import Ingredient, MealPlan, MealPlanItem, NutritionTotals
from src.school_attendance.school_attendance.nutrition.shopping import (
    compare_to_standard,
    daily_nutrition,
    parse_items,
    plans_for_day,
    plans_for_month,
    shopping_list,
    total_estimated_cost,
)

RICE = Ingredient(ingredient_id=1, name="ข้าวสาร", unit="kg", calories=130, protein=2.7, fat=0.3, carbs=28, price=5)
EGG = Ingredient(ingredient_id=2, name="ไข่ไก่", unit="ฟอง", calories=70, protein=6, fat=5, carbs=0.5, price=4)
SALT = Ingredient(ingredient_id=3, name="เกลือ", unit="g", price=None)


def plan(plan_id, date, *items):
    return MealPlan(
        plan_id=plan_id,
        date=date,
        target_group=NutritionTargetGroup.PRIMARY,
        menu_name=f"เมนู {plan_id}",
        meal_type=MealType.LUNCH,
        items=tuple(MealPlanItem(ingredient_id=i, amount=a) for i, a in items),
    )


def test_shopping_list_multiplies_by_student_count():
    rows = shopping_list([plan(1, "01/06/2567", (1, 2))], [RICE], 100)

    assert len(rows) == 1
    assert rows[0].total_amount == 200
    assert rows[0].total_price == 1000
    assert rows[0].to_dict() == {"id": 1, "name": "ข้าวสาร", "unit": "kg", "amount": 200, "price": 5, "total_price": 1000}


def test_shopping_list_sums_across_plans_and_sorts_by_cost():
    plans = [plan(1, "01/06/2567", (1, 1), (2, 1)), plan(2, "01/06/2567", (2, 2))]

    rows = shopping_list(plans, [RICE, EGG], 10)

    assert [r.ingredient_id for r in rows] == [2, 1]
    assert rows[0].total_amount == 30
    assert total_estimated_cost(rows) == 30 * 4 + 10 * 5


def test_shopping_list_skips_unknown_ingredients():
    rows = shopping_list([plan(1, "01/06/2567", (1, 1), (99, 5))], [RICE], 10)

    assert [r.ingredient_id for r in rows] == [1]


def test_missing_price_costs_nothing():
    rows = shopping_list([plan(1, "01/06/2567", (3, 2))], [SALT], 10)

    assert rows[0].total_amount == 20
    assert rows[0].total_price == 0


def test_parse_items_accepts_json_with_single_quotes():
    items = parse_items("[{'ingredientId': 1, 'amount': 0.2}, {'ingredient_id': '2', 'amount': '1'}]")

    assert items == (MealPlanItem(ingredient_id=1, amount=0.2), MealPlanItem(ingredient_id=2, amount=1.0))


@pytest.mark.parametrize("raw", [None, "", "not json", "[broken", {"ingredient_id": 1}, 42])
def test_parse_items_tolerates_garbage(raw):
    assert parse_items(raw) == ()


def test_parse_items_drops_entries_without_ingredient():
    assert parse_items([{"amount": 1}, {"ingredient_id": 2}]) == (MealPlanItem(ingredient_id=2, amount=0.0),)


def test_plans_filtered_by_day_and_month():
    plans = [plan(1, "01/06/2567"), plan(2, "15/06/2567"), plan(3, "01/07/2567"), plan(4, "bad")]

    assert [p.plan_id for p in plans_for_day(plans, "01/06/2567")] == [1]
    assert [p.plan_id for p in plans_for_month(plans, 6, 2567)] == [1, 2]


def test_daily_nutrition_is_per_person():
    totals = daily_nutrition([plan(1, "01/06/2567", (1, 2), (2, 1), (99, 3))], [RICE, EGG])

    assert totals.calories == pytest.approx(330)
    assert totals.protein == pytest.approx(11.4)


def test_compare_to_standard():
    rows = compare_to_standard(NutritionTotals(calories=800, protein=45, fat=0, carbs=115), NutritionTargetGroup.PRIMARY)

    by_name = {r["nutrient"]: r for r in rows}
    assert by_name["calories"]["percent"] == 50.0
    assert by_name["protein"]["percent"] == 100.0
    assert by_name["fat"]["target"] == 53
