"""Calorie calculation from macronutrients."""

from sazio.domain.goals import Goal, GoalView
from sazio.domain.nutrition import Macros

CALORIES_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}


def calculate_calories(macros: Macros) -> float:
    """Return calories for the given macro grams."""
    return (
        macros.protein * CALORIES_PER_GRAM["protein"]
        + macros.carbs * CALORIES_PER_GRAM["carbs"]
        + macros.fat * CALORIES_PER_GRAM["fat"]
    )


def with_calorie_goal(goal: Goal) -> GoalView:
    """Attach the derived calorie target to a goal."""
    return GoalView(
        id=goal.id,
        name=goal.name,
        start_at=goal.start_at,
        end_at=goal.end_at,
        protein_goal=goal.protein_goal,
        carbs_goal=goal.carbs_goal,
        fat_goal=goal.fat_goal,
        calorie_goal=calculate_calories(
            Macros(
                protein=goal.protein_goal,
                carbs=goal.carbs_goal,
                fat=goal.fat_goal,
            )
        ),
    )
