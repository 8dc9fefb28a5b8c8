from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, parse_buddhist_date
from ..common.validators import require_non_empty, require_non_negative, require_non_negative_number
from ..core.constants import DEFAULT_STUDENT_COUNT
from ..core.enums import MealType, NutritionTargetGroup
from ..core.exceptions import NotFoundError, SaveError, ValidationError
from ..people.repository import PeopleRepository
from .model import Ingredient, MealPlan, NutritionTotals, ShoppingListItem
from .repository import NutritionRepository
from .shopping import (
    compare_to_standard,
    daily_nutrition,
    parse_items,
    plans_for_day,
    plans_for_month,
    shopping_list,
    total_estimated_cost,
)

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "เกิดข้อผิดพลาดในการเชื่อมต่อเซิร์ฟเวอร์ กรุณาลองใหม่อีกครั้ง"


def new_entity_id() -> int:
    """Millisecond timestamp, used when a new ingredient or plan arrives without an id."""
    return int(now_local().timestamp() * 1000)


@dataclass(frozen=True)
class ShoppingReport:
    items: list[ShoppingListItem]
    total_cost: float
    student_count: int
    plan_count: int

    def to_dict(self) -> dict:
        return {
            "items": [i.to_dict() for i in self.items],
            "total_cost": self.total_cost,
            "student_count": self.student_count,
            "plan_count": self.plan_count,
        }


@dataclass(frozen=True)
class DailyNutritionReport:
    date: str
    target_group: NutritionTargetGroup
    totals: NutritionTotals
    comparison: list[dict]
    plan_count: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "target_group": self.target_group.value,
            "totals": self.totals.to_dict(),
            "comparison": self.comparison,
            "plan_count": self.plan_count,
        }


class NutritionService:
    def __init__(self, nutrition: NutritionRepository, people: PeopleRepository):
        self._nutrition = nutrition
        self._people = people

    def default_student_count(self) -> int:
        return len(self._people.list_students()) or DEFAULT_STUDENT_COUNT

    def _student_count(self, student_count) -> int:
        if student_count is None or student_count == "":
            return self.default_student_count()
        return require_non_negative(student_count, "จำนวนนักเรียน")

    def daily_shopping_list(self, date: str, *, student_count: Optional[int] = None) -> ShoppingReport:
        if parse_buddhist_date(date) is None:
            raise ValidationError("วันที่ไม่ถูกต้อง (DD/MM/YYYY)")
        plans = plans_for_day(self._nutrition.list_meal_plans(), date)
        return self._report(plans, self._student_count(student_count))

    def monthly_shopping_list(
        self,
        month: int,
        buddhist_year: int,
        *,
        student_count: Optional[int] = None,
    ) -> ShoppingReport:
        if not 1 <= int(month) <= 12:
            raise ValidationError("เดือนไม่ถูกต้อง")
        plans = plans_for_month(self._nutrition.list_meal_plans(), month, buddhist_year)
        return self._report(plans, self._student_count(student_count))

    def _report(self, plans, student_count: int) -> ShoppingReport:
        items = shopping_list(plans, self._nutrition.list_ingredients(), student_count)
        return ShoppingReport(
            items=items,
            total_cost=total_estimated_cost(items),
            student_count=student_count,
            plan_count=len(plans),
        )

    def daily_nutrition(self, date: str, target_group: NutritionTargetGroup) -> DailyNutritionReport:
        plans = plans_for_day(self._nutrition.list_meal_plans(), date)
        totals = daily_nutrition(plans, self._nutrition.list_ingredients())
        return DailyNutritionReport(
            date=date,
            target_group=target_group,
            totals=totals,
            comparison=compare_to_standard(totals, target_group),
            plan_count=len(plans),
        )

    # ----- catalogue management -----

    def list_ingredients(self) -> list[Ingredient]:
        return list(self._nutrition.list_ingredients())

    def list_meal_plans(self, *, date: Optional[str] = None) -> list[MealPlan]:
        plans = self._nutrition.list_meal_plans()
        return plans_for_day(plans, date) if date else list(plans)

    def save_ingredient(self, data: Mapping[str, Any]) -> Ingredient:
        price = data.get("price")
        ingredient = Ingredient(
            ingredient_id=_entity_id(data.get("id")),
            name=require_non_empty(data.get("name"), "ชื่อวัตถุดิบ"),
            unit=require_non_empty(data.get("unit"), "หน่วยนับ"),
            calories=require_non_negative_number(data.get("calories") or 0, "พลังงาน"),
            protein=require_non_negative_number(data.get("protein") or 0, "โปรตีน"),
            fat=require_non_negative_number(data.get("fat") or 0, "ไขมัน"),
            carbs=require_non_negative_number(data.get("carbs") or 0, "คาร์โบไฮเดรต"),
            price=None if price is None or price == "" else require_non_negative_number(price, "ราคา"),
        )
        self._write("save ingredient", lambda: self._nutrition.save_ingredient(ingredient))
        logger.info("Saved ingredient %s (%s)", ingredient.ingredient_id, ingredient.name)
        return ingredient

    def save_meal_plan(self, data: Mapping[str, Any]) -> MealPlan:
        date = str(data.get("date") or "")
        if parse_buddhist_date(date) is None:
            raise ValidationError("วันที่ไม่ถูกต้อง (DD/MM/YYYY)")
        try:
            target_group = NutritionTargetGroup(str(data.get("target_group") or ""))
        except ValueError:
            raise ValidationError("กลุ่มเป้าหมายไม่ถูกต้อง")
        try:
            meal_type = MealType(str(data.get("meal_type") or ""))
        except ValueError:
            raise ValidationError("มื้ออาหารไม่ถูกต้อง")

        raw_items = data.get("items")
        if raw_items is not None and not isinstance(raw_items, (list, str)):
            raise ValidationError("รายการวัตถุดิบไม่ถูกต้อง")
        items = parse_items(raw_items)
        for item in items:
            require_non_negative_number(item.amount, "ปริมาณ")

        plan = MealPlan(
            plan_id=_entity_id(data.get("id")),
            date=date,
            target_group=target_group,
            menu_name=require_non_empty(data.get("menu_name"), "ชื่อเมนู"),
            meal_type=meal_type,
            items=items,
        )
        self._write("save meal plan", lambda: self._nutrition.save_meal_plan(plan))
        logger.info("Saved meal plan %s for %s %s", plan.plan_id, plan.date, plan.meal_type.value)
        return plan

    def delete_ingredients(self, ingredient_ids: Sequence) -> int:
        ids = _id_list(ingredient_ids)
        deleted = self._write("delete ingredients", lambda: self._nutrition.delete_ingredients(ids))
        if not deleted:
            raise NotFoundError("ไม่พบวัตถุดิบที่เลือก")
        logger.info("Deleted %d ingredients", deleted)
        return deleted

    def delete_meal_plans(self, plan_ids: Sequence) -> int:
        ids = _id_list(plan_ids)
        deleted = self._write("delete meal plans", lambda: self._nutrition.delete_meal_plans(ids))
        if not deleted:
            raise NotFoundError("ไม่พบเมนูที่เลือก")
        logger.info("Deleted %d meal plans", deleted)
        return deleted

    def _write(self, action: str, call):
        try:
            return call()
        except Exception as e:
            logger.exception("Failed to %s", action)
            raise SaveError(SAVE_FAILED_MESSAGE) from e


def _entity_id(raw) -> int:
    if raw is None or raw == "" or raw == 0:
        return new_entity_id()
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("รหัสไม่ถูกต้อง")


def _id_list(raw: Sequence) -> list[int]:
    if not raw:
        raise ValidationError("กรุณาเลือกรายการที่ต้องการลบ")
    try:
        return [int(i) for i in raw]
    except (TypeError, ValueError):
        raise ValidationError("รหัสไม่ถูกต้อง")
