"""Pydantic models for procedure request bodies."""

from pydantic import BaseModel, Field


class CreateGoalInput(BaseModel):
    """Body of createGoal."""

    name: str
    start_at: int = Field(alias="startAt")
    end_at: int | None = Field(default=None, alias="endAt")
    protein_goal: int = Field(alias="proteinGoal")
    carbs_goal: int = Field(alias="carbsGoal")
    fat_goal: int = Field(alias="fatGoal")
    close_previous_goal: bool = Field(default=False, alias="closePreviousGoal")


class UpdateGoalInput(BaseModel):
    """Body of updateGoal; only supplied fields change."""

    id: int
    name: str | None = None
    start_at: int | None = Field(default=None, alias="startAt")
    end_at: int | None = Field(default=None, alias="endAt")
    protein_goal: int | None = Field(default=None, alias="proteinGoal")
    carbs_goal: int | None = Field(default=None, alias="carbsGoal")
    fat_goal: int | None = Field(default=None, alias="fatGoal")


class DeleteGoalInput(BaseModel):
    """Body of deleteGoal."""

    id: int


class CreateFoodInput(BaseModel):
    """Body of createFood."""

    name: str
    serving_size: int = Field(alias="servingSize")
    serving_unit: str = Field(alias="servingUnit")
    protein: float
    carbs: float
    fat: float
    barcode: str | None = None


class AddServingUnitInput(BaseModel):
    """Body of addServingUnit."""

    food_id: int = Field(alias="foodId")
    name: str
    grams_equivalent: int = Field(alias="gramsEquivalent")


class LogFoodInput(BaseModel):
    """Body of logFood."""

    food_id: int = Field(alias="foodId")
    quantity: float
    serving_unit_id: int | None = Field(default=None, alias="servingUnitId")
