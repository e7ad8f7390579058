"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from diet_planner.adapters.optimization_models import OptimizationRequestContext
from diet_planner.api.models import (
    AchievabilityModel,
    ApplySuggestionRequest,
    CaloriesUpdate,
    EnergyRequest,
    EnergyResponse,
    FiberUpdate,
    GramsUpdate,
    IngredientLineModel,
    MacroTargetModel,
    MacroTotalsModel,
    MealNutritionRequest,
    OptimizeRequest,
    OptimizeResponse,
    PercentageUpdate,
    SuggestionModel,
    SuggestionsResponse,
)
from diet_planner.app_logging import configure_logging
from diet_planner.containers import AppContainer
from diet_planner.domain.advisor import missing_calories
from diet_planner.domain.energy import compute_energy
from diet_planner.domain.optimization import OptimizationOutcome
from diet_planner.domain.units import MissingUnitWeightError
from diet_planner.services.optimization import ErrorCode, MealGoal, OptimizationError

_UNPROCESSABLE = 422

_ERROR_STATUS = {
    ErrorCode.INVALID_INPUT.value: _UNPROCESSABLE,
    ErrorCode.INVALID_INGREDIENTS.value: _UNPROCESSABLE,
    ErrorCode.UNAUTHORIZED.value: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN.value: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN.value: status.HTTP_403_FORBIDDEN,
    ErrorCode.RATE_LIMIT_ERROR.value: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.TIMEOUT_ERROR.value: status.HTTP_504_GATEWAY_TIMEOUT,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(OptimizationError)
    async def optimization_error_handler(
        _request: Request, exc: OptimizationError
    ) -> JSONResponse:
        logger.warning("Optimization failed: %s", exc)
        return JSONResponse(
            status_code=_ERROR_STATUS.get(exc.code, status.HTTP_502_BAD_GATEWAY),
            content={"error": {"code": exc.code, "message": exc.message}},
        )

    @app.exception_handler(MissingUnitWeightError)
    async def unit_weight_error_handler(
        _request: Request, exc: MissingUnitWeightError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_UNPROCESSABLE,
            content={"error": {"code": "MISSING_UNIT_WEIGHT", "message": str(exc)}},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/energy")
    async def energy(body: EnergyRequest) -> EnergyResponse:
        """Estimate BMR and TDEE from body metrics."""
        try:
            result = compute_energy(
                body.weight_kg,
                body.height_cm,
                body.age_years,
                body.sex,
                body.activity_factor,
            )
        except ValueError as exc:
            raise HTTPException(status_code=_UNPROCESSABLE, detail=str(exc)) from exc
        return EnergyResponse(bmr=result.bmr, tdee=result.tdee)

    @app.post("/meals/nutrition")
    async def meal_nutrition(
        body: MealNutritionRequest, request: Request
    ) -> MacroTotalsModel:
        """Aggregate macro totals for one meal."""
        state_container: AppContainer = request.app.state.container
        lines = [item.to_domain() for item in body.ingredients]
        totals = state_container.meal_nutrition_service.meal_totals(lines)
        return MacroTotalsModel.from_domain(totals)

    @app.get("/day-plans/{day_plan_id}/targets")
    async def get_targets(day_plan_id: str, request: Request) -> MacroTargetModel:
        """Return the synchronized targets of a day-plan."""
        service = request.app.state.container.day_plan_target_service
        return MacroTargetModel.from_domain(service.get(day_plan_id))

    @app.post("/day-plans/{day_plan_id}/targets/calories")
    async def set_calories(
        day_plan_id: str, body: CaloriesUpdate, request: Request
    ) -> MacroTargetModel:
        """Set the calorie target, re-deriving percentages from grams."""
        service = request.app.state.container.day_plan_target_service
        return MacroTargetModel.from_domain(
            service.set_calories(day_plan_id, body.calories)
        )

    @app.post("/day-plans/{day_plan_id}/targets/percentage")
    async def set_percentage(
        day_plan_id: str, body: PercentageUpdate, request: Request
    ) -> MacroTargetModel:
        """Set a macro by its share of calories."""
        service = request.app.state.container.day_plan_target_service
        return MacroTargetModel.from_domain(
            service.set_percentage(day_plan_id, body.macro, body.percentage)
        )

    @app.post("/day-plans/{day_plan_id}/targets/grams")
    async def set_grams(
        day_plan_id: str, body: GramsUpdate, request: Request
    ) -> MacroTargetModel:
        """Set a macro by grams."""
        service = request.app.state.container.day_plan_target_service
        return MacroTargetModel.from_domain(
            service.set_grams(day_plan_id, body.macro, body.grams)
        )

    @app.post("/day-plans/{day_plan_id}/targets/fiber")
    async def set_fiber(
        day_plan_id: str, body: FiberUpdate, request: Request
    ) -> MacroTargetModel:
        """Set the fiber target in grams."""
        service = request.app.state.container.day_plan_target_service
        return MacroTargetModel.from_domain(service.set_fiber(day_plan_id, body.grams))

    @app.post("/day-plans/{day_plan_id}/targets/seed")
    async def seed_targets(
        day_plan_id: str, body: EnergyRequest, request: Request
    ) -> MacroTargetModel:
        """Use the client's TDEE as the day-plan's calorie target."""
        service = request.app.state.container.day_plan_target_service
        try:
            result = compute_energy(
                body.weight_kg,
                body.height_cm,
                body.age_years,
                body.sex,
                body.activity_factor,
            )
        except ValueError as exc:
            raise HTTPException(status_code=_UNPROCESSABLE, detail=str(exc)) from exc
        return MacroTargetModel.from_domain(
            service.seed_from_energy(day_plan_id, result)
        )

    @app.get("/day-plans/{day_plan_id}/targets/suggestions")
    async def get_suggestions(
        day_plan_id: str, request: Request
    ) -> SuggestionsResponse:
        """Return gram suggestions closing the calorie gap."""
        service = request.app.state.container.day_plan_target_service
        target = service.get(day_plan_id)
        return SuggestionsResponse(
            missing_calories=missing_calories(target),
            suggestions=[
                SuggestionModel(
                    macro=item.macro,
                    grams=item.grams,
                    missing_calories=item.missing_calories,
                    message=item.message,
                )
                for item in service.suggestions(day_plan_id)
            ],
        )

    @app.post("/day-plans/{day_plan_id}/targets/suggestions/apply")
    async def apply_suggestion(
        day_plan_id: str, body: ApplySuggestionRequest, request: Request
    ) -> MacroTargetModel:
        """Close the calorie gap through a single macro."""
        service = request.app.state.container.day_plan_target_service
        return MacroTargetModel.from_domain(
            service.apply_suggestion(day_plan_id, body.macro)
        )

    @app.delete("/day-plans/{day_plan_id}")
    async def remove_day_plan(day_plan_id: str, request: Request) -> dict[str, str]:
        """Forget a removed day-plan's targets."""
        service = request.app.state.container.day_plan_target_service
        if not service.remove(day_plan_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "ok"}

    @app.post("/optimizations")
    async def optimize(
        body: OptimizeRequest,
        request: Request,
        authorization: str | None = Header(default=None),
    ) -> OptimizeResponse:
        """Optimize a meal remotely and merge the proposal into its lines."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.optimization_service.optimize(
            user_id=body.user_id,
            meal_name=body.meal_name,
            goal=MealGoal(
                protein=body.target_macros.protein,
                fat=body.target_macros.fat,
                carbs=body.target_macros.carbs,
            ),
            lines=[item.to_domain() for item in body.ingredients],
            access_token=_bearer_token(authorization),
            context=OptimizationRequestContext(
                template_id=body.template_id,
                day_plan_id=body.day_plan_id,
                client_id=body.client_id,
            ),
            ai_model=body.ai_model,
        )
        return _outcome_response(outcome)

    return app


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def _outcome_response(outcome: OptimizationOutcome) -> OptimizeResponse:
    achievability = None
    if outcome.achievability is not None:
        achievability = AchievabilityModel(
            overall_score=outcome.achievability.overall_score,
            feasibility=outcome.achievability.feasibility.value,
            main_challenges=outcome.achievability.main_challenges,
        )
    return OptimizeResponse(
        ingredients=[
            IngredientLineModel.from_domain(line) for line in outcome.merge.lines
        ],
        totals=MacroTotalsModel.from_domain(outcome.totals),
        previous_totals=MacroTotalsModel.from_domain(outcome.previous_totals),
        skipped_products=outcome.merge.skipped,
        untouched_products=outcome.merge.untouched,
        comment=outcome.comment,
        achievability=achievability,
    )
