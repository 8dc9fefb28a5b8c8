from __future__ import annotations

from typing import Protocol, Sequence

from .model import Ingredient, MealPlan


class NutritionRepository(Protocol):
    """Ingredient catalogue and meal plans.

    Saves are upserts keyed on the entity id; deletes take many ids and
    return how many rows went away.
    """

    def list_ingredients(self) -> Sequence[Ingredient]:
        raise NotImplementedError

    def list_meal_plans(self) -> Sequence[MealPlan]:
        raise NotImplementedError

    def save_ingredient(self, ingredient: Ingredient) -> None:
        raise NotImplementedError

    def delete_ingredients(self, ingredient_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def save_meal_plan(self, plan: MealPlan) -> None:
        raise NotImplementedError

    def delete_meal_plans(self, plan_ids: Sequence[int]) -> int:
        raise NotImplementedError
