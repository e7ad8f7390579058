"""Ingredient optimization: request building, remote call, merge."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum

import httpx
from pydantic import ValidationError

from diet_planner.adapters.optimization_client import OptimizationClient
from diet_planner.adapters.optimization_models import (
    CurrentIngredient,
    OptimizationRequest,
    OptimizationRequestContext,
    OptimizationResponsePayload,
    TargetMacros,
)
from diet_planner.domain.aggregation import aggregate, line_macros
from diet_planner.domain.ingredients import IngredientLine
from diet_planner.domain.merge import merge_proposal
from diet_planner.domain.nutrition import MacroTotals, Product
from diet_planner.domain.optimization import (
    Achievability,
    Feasibility,
    OptimizationOutcome,
    OptimizationProposal,
    OptimizationResponse,
    ProposalEntry,
)
from diet_planner.services.products import ProductService

_logger = logging.getLogger(__name__)

MAX_PROTEIN_G = 500
MAX_FAT_G = 200
MAX_CARBS_G = 800


class ErrorCode(str, Enum):
    """Failure categories of an optimization attempt."""

    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    FORBIDDEN = "FORBIDDEN"
    INVALID_INGREDIENTS = "INVALID_INGREDIENTS"
    AI_ERROR = "AI_ERROR"
    AI_QUALITY_ERROR = "AI_QUALITY_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


NON_RETRYABLE_CODES = frozenset(
    {
        ErrorCode.INVALID_INPUT.value,
        ErrorCode.UNAUTHORIZED.value,
        ErrorCode.INVALID_TOKEN.value,
        ErrorCode.FORBIDDEN.value,
        ErrorCode.INVALID_INGREDIENTS.value,
    }
)

_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED.value,
    403: ErrorCode.FORBIDDEN.value,
    429: ErrorCode.RATE_LIMIT_ERROR.value,
}


class OptimizationError(Exception):
    """Optimization failure with a stable error code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.code not in NON_RETRYABLE_CODES


@dataclass(frozen=True)
class MealGoal:
    """Gram targets for a single meal."""

    protein: float
    fat: float
    carbs: float


@dataclass
class OptimizationService:
    """Prepares, sends and applies ingredient optimization requests."""

    client: OptimizationClient
    product_service: ProductService
    retry_attempts: int = 2
    retry_base_delay_seconds: float = 1.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def build_request(  # noqa: PLR0913
        self,
        user_id: str,
        meal_name: str,
        goal: MealGoal,
        lines: Sequence[IngredientLine],
        *,
        context: OptimizationRequestContext | None = None,
        ai_model: str | None = None,
    ) -> OptimizationRequest:
        """Validate inputs and snapshot the current lines for the request."""
        _validate_inputs(user_id, meal_name, goal, lines)
        products = self.product_service.get_many(line.product_id for line in lines)
        missing = [
            line.product_id for line in lines if line.product_id not in products
        ]
        if missing:
            raise OptimizationError(
                ErrorCode.INVALID_INGREDIENTS.value,
                f"Unknown products: {', '.join(missing)}",
            )
        return OptimizationRequest(
            user_id=user_id,
            meal_name=meal_name.strip(),
            target_macros=TargetMacros(
                protein=goal.protein, fat=goal.fat, carbs=goal.carbs
            ),
            current_ingredients=[
                _snapshot(line, products[line.product_id]) for line in lines
            ],
            context=context,
            ai_model=ai_model,
        )

    async def request_proposal(
        self, request: OptimizationRequest, access_token: str | None = None
    ) -> OptimizationResponse:
        """Call the service with retries and parse its proposal."""
        payload = request.model_dump(mode="json", exclude_none=True)
        raw = await self._call_with_retry(
            lambda: self.client.optimize(payload, access_token),
            action=f"optimize:{request.meal_name}",
        )
        return parse_response(raw)

    async def optimize(  # noqa: PLR0913
        self,
        user_id: str,
        meal_name: str,
        goal: MealGoal,
        lines: Sequence[IngredientLine],
        *,
        access_token: str | None = None,
        context: OptimizationRequestContext | None = None,
        ai_model: str | None = None,
    ) -> OptimizationOutcome:
        """Run a full optimization round and merge the proposal into ``lines``."""
        request = self.build_request(
            user_id, meal_name, goal, lines, context=context, ai_model=ai_model
        )
        response = await self.request_proposal(request, access_token)
        return self.apply_proposal(lines, response)

    def apply_proposal(
        self, lines: Sequence[IngredientLine], response: OptimizationResponse
    ) -> OptimizationOutcome:
        """Merge a proposal and re-aggregate before and after totals."""
        product_ids = [line.product_id for line in lines] + [
            entry.product_id for entry in response.proposal.entries
        ]
        products = self.product_service.get_many(product_ids)
        merged = merge_proposal(lines, response.proposal, products)
        return OptimizationOutcome(
            merge=merged,
            totals=aggregate(merged.lines, products),
            previous_totals=aggregate(lines, products),
            comment=response.comment,
            achievability=response.achievability,
        )

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call the service, backing off exponentially on transient errors."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                error = _to_optimization_error(exc)
                attempt += 1
                _logger.warning(
                    "Optimization %s failed (attempt %s/%s, code=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    error.code,
                    error.message,
                )
                if not error.retryable or attempt > self.retry_attempts:
                    if error is exc:
                        raise
                    raise error from exc
                await self.sleep(self.retry_base_delay_seconds * 2 ** (attempt - 1))


def _validate_inputs(
    user_id: str, meal_name: str, goal: MealGoal, lines: Sequence[IngredientLine]
) -> None:
    problem: str | None = None
    if not user_id:
        problem = "Missing user id"
    elif not meal_name or not meal_name.strip():
        problem = "Missing meal name"
    elif not 0 <= goal.protein <= MAX_PROTEIN_G:
        problem = f"Invalid protein target (0-{MAX_PROTEIN_G} g)"
    elif not 0 <= goal.fat <= MAX_FAT_G:
        problem = f"Invalid fat target (0-{MAX_FAT_G} g)"
    elif not 0 <= goal.carbs <= MAX_CARBS_G:
        problem = f"Invalid carbs target (0-{MAX_CARBS_G} g)"
    elif not lines:
        problem = "No ingredients to optimize"
    elif any(line.quantity < 0 for line in lines):
        problem = "Invalid ingredient quantity (negative value)"
    if problem is not None:
        raise OptimizationError(ErrorCode.INVALID_INPUT.value, problem)


def _snapshot(line: IngredientLine, product: Product) -> CurrentIngredient:
    macros = line_macros(line, product)
    unit_weight = (
        line.unit_weight if line.unit_weight is not None else product.unit_weight
    )
    return CurrentIngredient(
        id=line.product_id,
        name=line.name or product.name,
        quantity=line.quantity,
        unit=line.unit,
        calories=macros.calories,
        protein=macros.protein,
        fat=macros.fat,
        carbs=macros.carbs,
        fiber=macros.fiber,
        unit_weight=unit_weight,
    )


def parse_response(raw: dict[str, object]) -> OptimizationResponse:
    """Turn a raw response into a domain proposal or raise OptimizationError."""
    try:
        envelope = OptimizationResponsePayload.model_validate(raw)
    except ValidationError as exc:
        raise OptimizationError(ErrorCode.PROCESSING_ERROR.value, str(exc)) from exc
    if not envelope.success or envelope.data is None:
        if envelope.error is not None:
            raise OptimizationError(envelope.error.code, envelope.error.message)
        raise OptimizationError(
            ErrorCode.PROCESSING_ERROR.value, "Response carried no data"
        )

    entries = [
        ProposalEntry(
            product_id=item.id,
            quantity=item.quantity,
            unit=item.unit,
            name=item.name,
            macros=_proposal_macros(
                item.calories, item.protein, item.fat, item.carbs, item.fiber
            ),
        )
        for item in envelope.data.optimized_ingredients
    ]
    achievability = None
    if envelope.data.achievability is not None:
        block = envelope.data.achievability
        try:
            feasibility = Feasibility(block.feasibility.lower())
        except ValueError:
            raise OptimizationError(
                ErrorCode.PROCESSING_ERROR.value,
                f"Unknown feasibility tier: {block.feasibility}",
            ) from None
        achievability = Achievability(
            overall_score=block.overall_score,
            feasibility=feasibility,
            main_challenges=list(block.main_challenges),
        )
    return OptimizationResponse(
        proposal=OptimizationProposal(entries=entries),
        comment=envelope.data.ai_comment,
        achievability=achievability,
    )


def _proposal_macros(  # noqa: PLR0913
    calories: float | None,
    protein: float | None,
    fat: float | None,
    carbs: float | None,
    fiber: float | None,
) -> MacroTotals | None:
    if None in (calories, protein, fat, carbs):
        return None
    return MacroTotals(
        calories=calories or 0.0,
        protein=protein or 0.0,
        fat=fat or 0.0,
        carbs=carbs or 0.0,
        fiber=fiber or 0.0,
    )


def _to_optimization_error(exc: Exception) -> OptimizationError:
    if isinstance(exc, OptimizationError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return OptimizationError(ErrorCode.TIMEOUT_ERROR.value, "Request timed out")
    if isinstance(exc, httpx.HTTPStatusError):
        return _from_status_error(exc)
    if isinstance(exc, httpx.TransportError):
        return OptimizationError(ErrorCode.NETWORK_ERROR.value, str(exc))
    return OptimizationError(ErrorCode.INTERNAL_ERROR.value, str(exc))


def _from_status_error(exc: httpx.HTTPStatusError) -> OptimizationError:
    response = exc.response
    text = response.text
    try:
        body = json.loads(text)
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        if error.get("code"):
            return OptimizationError(str(error["code"]), str(error.get("message", "")))
    code = _STATUS_CODES.get(response.status_code, ErrorCode.INTERNAL_ERROR.value)
    return OptimizationError(code, f"HTTP {response.status_code}: {text[:100]}")
