"""Pydantic models for the HTTP API."""

from dataclasses import asdict
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field

from diet_planner.domain.ingredients import IngredientLine, PrecomputedLine, make_line
from diet_planner.domain.nutrition import MacroTotals
from diet_planner.domain.precision import parse_number
from diet_planner.domain.targets import Macro, MacroTarget


def _lenient_number(value: object) -> object:
    if isinstance(value, str):
        return parse_number(value)
    return value


# Accepts "35,5" as well as 35.5; malformed strings become 0.
LenientFloat = Annotated[float, BeforeValidator(_lenient_number)]


class MacroTotalsModel(BaseModel):
    """Absolute macro amounts."""

    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    carbs: float = 0.0
    fiber: float = 0.0

    @classmethod
    def from_domain(cls, totals: MacroTotals) -> "MacroTotalsModel":
        return cls(**asdict(totals))

    def to_domain(self) -> MacroTotals:
        return MacroTotals(**self.model_dump())


class IngredientLineModel(BaseModel):
    """Ingredient line as sent by clients."""

    id: str | None = None
    product_id: str
    quantity: LenientFloat
    unit: str
    unit_weight: LenientFloat | None = None
    name: str | None = None
    macros: MacroTotalsModel | None = None

    def to_domain(self) -> IngredientLine:
        return make_line(
            self.product_id,
            self.quantity,
            self.unit,
            self.unit_weight,
            name=self.name,
            macros=self.macros.to_domain() if self.macros else None,
            line_id=self.id,
        )

    @classmethod
    def from_domain(cls, line: IngredientLine) -> "IngredientLineModel":
        macros = (
            MacroTotalsModel.from_domain(line.macros)
            if isinstance(line, PrecomputedLine)
            else None
        )
        return cls(
            id=line.id,
            product_id=line.product_id,
            quantity=line.quantity,
            unit=line.unit,
            unit_weight=line.unit_weight,
            name=line.name,
            macros=macros,
        )


class EnergyRequest(BaseModel):
    """Body metrics for a BMR/TDEE estimate."""

    weight_kg: LenientFloat = Field(gt=0)
    height_cm: LenientFloat = Field(gt=0)
    age_years: LenientFloat = Field(ge=0)
    sex: str
    activity_factor: LenientFloat = 1.2


class EnergyResponse(BaseModel):
    """BMR/TDEE pair in kcal."""

    bmr: float
    tdee: float


class MealNutritionRequest(BaseModel):
    """Lines of one meal."""

    ingredients: list[IngredientLineModel]


class CaloriesUpdate(BaseModel):
    calories: LenientFloat


class PercentageUpdate(BaseModel):
    macro: Macro
    percentage: LenientFloat


class GramsUpdate(BaseModel):
    macro: Macro
    grams: LenientFloat


class FiberUpdate(BaseModel):
    grams: LenientFloat


class ApplySuggestionRequest(BaseModel):
    macro: Macro


class MacroTargetModel(BaseModel):
    """Synchronized targets of a day-plan."""

    calories: float
    protein_pct: float
    protein_g: float
    fat_pct: float
    fat_g: float
    carbs_pct: float
    carbs_g: float
    fiber_g: float

    @classmethod
    def from_domain(cls, target: MacroTarget) -> "MacroTargetModel":
        return cls(**asdict(target))


class SuggestionModel(BaseModel):
    """Gram delta for one macro."""

    macro: Macro
    grams: float
    missing_calories: float
    message: str


class SuggestionsResponse(BaseModel):
    missing_calories: float
    suggestions: list[SuggestionModel]


class MealTargetModel(BaseModel):
    protein: float
    fat: float
    carbs: float


class OptimizeRequest(BaseModel):
    """Meal to optimize toward gram targets."""

    user_id: str
    meal_name: str
    target_macros: MealTargetModel
    ingredients: list[IngredientLineModel]
    day_plan_id: str | None = None
    template_id: str | None = None
    client_id: str | None = None
    ai_model: str | None = None


class AchievabilityModel(BaseModel):
    overall_score: float
    feasibility: str
    main_challenges: list[str]


class OptimizeResponse(BaseModel):
    """Merged ingredients with totals and passed-through narrative."""

    ingredients: list[IngredientLineModel]
    totals: MacroTotalsModel
    previous_totals: MacroTotalsModel
    skipped_products: list[str]
    untouched_products: list[str]
    comment: str
    achievability: AchievabilityModel | None = None
