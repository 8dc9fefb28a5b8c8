from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import MealType, NutritionTargetGroup


@dataclass(frozen=True)
class Ingredient:
    """Nutrients are per unit; `price` is the unit price, None when unknown."""

    ingredient_id: int
    name: str
    unit: str
    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0
    price: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.ingredient_id,
            "name": self.name,
            "unit": self.unit,
            "calories": self.calories,
            "protein": self.protein,
            "fat": self.fat,
            "carbs": self.carbs,
            "price": self.price,
        }


@dataclass(frozen=True)
class MealPlanItem:
    ingredient_id: int
    amount: float

    def to_dict(self) -> dict:
        return {"ingredient_id": self.ingredient_id, "amount": self.amount}


@dataclass(frozen=True)
class MealPlan:
    plan_id: int
    date: str
    target_group: NutritionTargetGroup
    menu_name: str
    meal_type: MealType
    items: tuple[MealPlanItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.plan_id,
            "date": self.date,
            "target_group": self.target_group.value,
            "menu_name": self.menu_name,
            "meal_type": self.meal_type.value,
            "items": [i.to_dict() for i in self.items],
        }


@dataclass(frozen=True)
class ShoppingListItem:
    ingredient_id: int
    name: str
    unit: str
    total_amount: float
    unit_price: float
    total_price: float

    def to_dict(self) -> dict:
        return {
            "id": self.ingredient_id,
            "name": self.name,
            "unit": self.unit,
            "amount": self.total_amount,
            "price": self.unit_price,
            "total_price": self.total_price,
        }


@dataclass(frozen=True)
class NutritionTotals:
    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0

    def to_dict(self) -> dict:
        return {"calories": self.calories, "protein": self.protein, "fat": self.fat, "carbs": self.carbs}
