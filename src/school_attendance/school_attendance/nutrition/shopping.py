"""Pure costing and nutrient totals over meal plans."""

from __future__ import annotations

import json
from typing import Any, Iterable, Sequence

from ..common.datetime_utils import buddhist_month_year
from ..core.constants import NUTRITION_STANDARDS
from ..core.enums import NutritionTargetGroup
from .model import Ingredient, MealPlan, MealPlanItem, NutritionTotals, ShoppingListItem


def parse_items(raw: Any) -> tuple[MealPlanItem, ...]:
    """Normalize stored meal-plan items.

    Accepts a list of dicts or a JSON string of one (single quotes are
    tolerated). Anything else, or entries without a usable ingredient id,
    yields no items.
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        text = raw.strip()
        if not (text.startswith("[") and text.endswith("]")):
            return ()
        if "'" in text:
            text = text.replace("'", '"')
        try:
            raw = json.loads(text)
        except ValueError:
            return ()
    if not isinstance(raw, list):
        return ()

    items = []
    for entry in raw:
        if isinstance(entry, MealPlanItem):
            items.append(entry)
            continue
        if not isinstance(entry, dict):
            continue
        try:
            ingredient_id = int(entry.get("ingredient_id", entry.get("ingredientId")))
        except (TypeError, ValueError):
            continue
        try:
            amount = float(entry.get("amount") or 0)
        except (TypeError, ValueError):
            amount = 0.0
        items.append(MealPlanItem(ingredient_id=ingredient_id, amount=amount))
    return tuple(items)


def plans_for_day(plans: Iterable[MealPlan], date: str) -> list[MealPlan]:
    return [p for p in plans if p.date == date]


def plans_for_month(plans: Iterable[MealPlan], month: int, buddhist_year: int) -> list[MealPlan]:
    return [p for p in plans if buddhist_month_year(p.date) == (int(month), int(buddhist_year))]


def shopping_list(
    plans: Iterable[MealPlan],
    ingredients: Sequence[Ingredient],
    student_count: int,
) -> list[ShoppingListItem]:
    """Totals per ingredient across plans, most expensive first.

    total_amount = sum(item.amount) * student_count and
    total_price = total_amount * unit price. Items whose ingredient is not in
    `ingredients` are skipped.
    """
    by_id = {i.ingredient_id: i for i in ingredients}
    amounts: dict[int, float] = {}

    for plan in plans:
        for item in plan.items:
            if item.ingredient_id not in by_id:
                continue
            amounts[item.ingredient_id] = amounts.get(item.ingredient_id, 0.0) + (item.amount or 0) * student_count

    rows = []
    for ingredient_id, amount in amounts.items():
        ing = by_id[ingredient_id]
        unit_price = ing.price or 0
        rows.append(
            ShoppingListItem(
                ingredient_id=ingredient_id,
                name=ing.name,
                unit=ing.unit,
                total_amount=amount,
                unit_price=unit_price,
                total_price=amount * unit_price,
            )
        )
    rows.sort(key=lambda r: r.total_price, reverse=True)
    return rows


def total_estimated_cost(items: Iterable[ShoppingListItem]) -> float:
    return sum(i.total_price for i in items)


def daily_nutrition(plans: Iterable[MealPlan], ingredients: Sequence[Ingredient]) -> NutritionTotals:
    """Per-person nutrient totals of the given plans."""
    by_id = {i.ingredient_id: i for i in ingredients}
    cal = pro = fat = carbs = 0.0
    for plan in plans:
        for item in plan.items:
            ing = by_id.get(item.ingredient_id)
            if not ing:
                continue
            amount = item.amount or 0
            cal += (ing.calories or 0) * amount
            pro += (ing.protein or 0) * amount
            fat += (ing.fat or 0) * amount
            carbs += (ing.carbs or 0) * amount
    return NutritionTotals(calories=cal, protein=pro, fat=fat, carbs=carbs)


def nutrition_standard(target_group: NutritionTargetGroup) -> dict:
    """Recommended daily intake for a target group."""
    return dict(NUTRITION_STANDARDS[target_group])


def compare_to_standard(totals: NutritionTotals, target_group: NutritionTargetGroup) -> list[dict]:
    standard = nutrition_standard(target_group)
    actual = totals.to_dict()
    return [
        {
            "nutrient": name,
            "value": actual[name],
            "target": target,
            "percent": round(actual[name] * 100 / target, 1) if target else 0.0,
        }
        for name, target in standard.items()
    ]
