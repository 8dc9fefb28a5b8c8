from __future__ import annotations

import json
import logging
from typing import Sequence

from ..core.enums import MealType, NutritionTargetGroup
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders
from .model import Ingredient, MealPlan
from .repository import NutritionRepository
from .shopping import parse_items

logger = logging.getLogger(__name__)


def _as_float(value) -> float:
    return float(value) if value is not None else 0.0


class MySQLNutritionRepository(NutritionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_ingredients(self) -> Sequence[Ingredient]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ingredient_id, name, unit, calories, protein, fat, carbs, price
                FROM ingredients
                ORDER BY ingredient_id
                """
            )
            return [
                Ingredient(
                    ingredient_id=int(r["ingredient_id"]),
                    name=r["name"],
                    unit=r.get("unit") or "",
                    calories=_as_float(r.get("calories")),
                    protein=_as_float(r.get("protein")),
                    fat=_as_float(r.get("fat")),
                    carbs=_as_float(r.get("carbs")),
                    price=float(r["price"]) if r.get("price") is not None else None,
                )
                for r in fetchall(cur)
            ]

    def list_meal_plans(self) -> Sequence[MealPlan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT plan_id, plan_date, target_group, menu_name, meal_type, items
                FROM meal_plans
                ORDER BY plan_id
                """
            )
            plans = []
            for r in fetchall(cur):
                try:
                    target_group = NutritionTargetGroup(r["target_group"])
                    meal_type = MealType(r["meal_type"])
                except ValueError:
                    logger.warning("Skipping meal plan %s with unknown target group or meal type", r["plan_id"])
                    continue
                plans.append(
                    MealPlan(
                        plan_id=int(r["plan_id"]),
                        date=str(r["plan_date"] or ""),
                        target_group=target_group,
                        menu_name=r.get("menu_name") or "",
                        meal_type=meal_type,
                        items=parse_items(r.get("items")),
                    )
                )
            return plans

    def save_ingredient(self, ingredient: Ingredient) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ingredients(ingredient_id, name, unit, calories, protein, fat, carbs, price)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    unit=VALUES(unit),
                    calories=VALUES(calories),
                    protein=VALUES(protein),
                    fat=VALUES(fat),
                    carbs=VALUES(carbs),
                    price=VALUES(price)
                """,
                (
                    ingredient.ingredient_id,
                    ingredient.name,
                    ingredient.unit,
                    ingredient.calories,
                    ingredient.protein,
                    ingredient.fat,
                    ingredient.carbs,
                    ingredient.price,
                ),
            )

    def delete_ingredients(self, ingredient_ids: Sequence[int]) -> int:
        ids = list(dict.fromkeys(int(i) for i in ingredient_ids))
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM ingredients WHERE ingredient_id IN ({placeholders(ids)})", tuple(ids))
            return int(cur.rowcount or 0)

    def save_meal_plan(self, plan: MealPlan) -> None:
        items = json.dumps([i.to_dict() for i in plan.items], ensure_ascii=False)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO meal_plans(plan_id, plan_date, target_group, menu_name, meal_type, items)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    plan_date=VALUES(plan_date),
                    target_group=VALUES(target_group),
                    menu_name=VALUES(menu_name),
                    meal_type=VALUES(meal_type),
                    items=VALUES(items)
                """,
                (plan.plan_id, plan.date, plan.target_group.value, plan.menu_name, plan.meal_type.value, items),
            )

    def delete_meal_plans(self, plan_ids: Sequence[int]) -> int:
        ids = list(dict.fromkeys(int(i) for i in plan_ids))
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM meal_plans WHERE plan_id IN ({placeholders(ids)})", tuple(ids))
            return int(cur.rowcount or 0)
