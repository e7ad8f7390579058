"""Pydantic models for optimization service payloads."""

from pydantic import BaseModel, Field


class CurrentIngredient(BaseModel):
    """Ingredient snapshot sent to the optimization service."""

    id: str
    name: str
    quantity: float
    unit: str
    calories: float
    protein: float
    fat: float
    carbs: float
    fiber: float
    unit_weight: float | None = None


class TargetMacros(BaseModel):
    """Gram goals for the meal being optimized."""

    protein: float
    fat: float
    carbs: float


class OptimizationRequestContext(BaseModel):
    """Optional identifiers echoed back for tracing."""

    template_id: str | None = None
    day_plan_id: str | None = None
    client_id: str | None = None


class OptimizationRequest(BaseModel):
    """Request body for the optimization call."""

    user_id: str
    meal_name: str
    target_macros: TargetMacros
    current_ingredients: list[CurrentIngredient]
    context: OptimizationRequestContext | None = None
    ai_model: str | None = None


class OptimizedIngredient(BaseModel):
    """Ingredient quantity proposed by the service."""

    id: str
    name: str | None = None
    quantity: float
    unit: str
    calories: float | None = None
    protein: float | None = None
    fat: float | None = None
    carbs: float | None = None
    fiber: float | None = None


class AchievabilityPayload(BaseModel):
    """Achievability block of the response."""

    overall_score: float = Field(ge=0, le=100)
    feasibility: str
    main_challenges: list[str] = Field(default_factory=list)


class OptimizationData(BaseModel):
    """Successful response data."""

    optimized_ingredients: list[OptimizedIngredient]
    ai_comment: str = ""
    achievability: AchievabilityPayload | None = None


class ErrorPayload(BaseModel):
    """Error block of a failed response."""

    code: str
    message: str = ""
    details: str | None = None


class OptimizationResponsePayload(BaseModel):
    """Envelope returned by the optimization service."""

    success: bool
    data: OptimizationData | None = None
    error: ErrorPayload | None = None
