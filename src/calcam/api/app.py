"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from calcam.adapters.images import decode_image, validate_image_upload
from calcam.api.models import (
    BmiRequest,
    EntryCreate,
    EntryUpdate,
    ProfileRequest,
    ScaleRequest,
)
from calcam.app_logging import configure_logging
from calcam.containers import AppContainer
from calcam.domain.errors import (
    CalcamError,
    HandleDisposed,
    InferenceError,
    ModelLoadError,
)
from calcam.domain.nutrition import NutrientProfile
from calcam.domain.vision import ClassificationCandidate
from calcam.services.energy import compute_bmi, ideal_weight_range
from calcam.services.nutrition import scale


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(CalcamError)
    async def handle_core_error(request: Request, exc: CalcamError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request %s failed: %s %s", request.url.path, exc.kind, exc.context
            )
        return JSONResponse(
            status_code=status_code,
            content=jsonable_encoder(
                {"error": exc.kind, "detail": exc.message, "context": exc.context}
            ),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/classify")
    async def classify(request: Request) -> dict[str, object]:
        """Classify a raw JPEG/PNG/WebP request body."""
        state_container: AppContainer = request.app.state.container
        payload = await request.body()
        candidates = await run_in_threadpool(
            _classify_payload, state_container, payload
        )
        return {"candidates": [candidate.model_dump() for candidate in candidates]}

    @app.get("/foods")
    async def search_foods(
        request: Request,
        q: str | None = None,
        limit: int = Query(20, ge=1),
    ) -> dict[str, object]:
        """Search the food catalog."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.catalog_service.search(q, limit=limit)
        return {"foods": jsonable_encoder(foods)}

    @app.get("/foods/{food_id}")
    async def get_food(food_id: str, request: Request) -> dict[str, object]:
        """Return a single food."""
        state_container: AppContainer = request.app.state.container
        return jsonable_encoder(_require_food(state_container, food_id))

    @app.post("/nutrition/scale")
    async def scale_food(body: ScaleRequest, request: Request) -> dict[str, object]:
        """Compute nutrition for a portion without logging it."""
        state_container: AppContainer = request.app.state.container
        food = _require_food(state_container, body.food_id)
        return jsonable_encoder(scale(food, body.grams))

    @app.post("/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(body: EntryCreate, request: Request) -> dict[str, object]:
        """Log a portion of a food."""
        state_container: AppContainer = request.app.state.container
        food = _require_food(state_container, body.food_id)
        entry = state_container.meal_log_service.add_entry(
            food, body.grams, day=body.day, time=body.time
        )
        return jsonable_encoder(entry)

    @app.get("/entries")
    async def list_entries(
        request: Request, day: date | None = None
    ) -> dict[str, object]:
        """List entries for a day (today by default)."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.meal_log_service.entries_for(day or date.today())
        return {"entries": jsonable_encoder(entries)}

    @app.patch("/entries/{entry_id}")
    async def update_entry(
        entry_id: int, body: EntryUpdate, request: Request
    ) -> dict[str, object]:
        """Change the grams of an entry."""
        state_container: AppContainer = request.app.state.container
        meal_log = state_container.meal_log_service
        entry = meal_log.get_entry(entry_id)
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        food = state_container.catalog_service.get(entry.food_id)
        if food is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Logged food is no longer in the catalog",
            )
        return jsonable_encoder(meal_log.update_grams(entry_id, body.grams, food))

    @app.delete("/entries/{entry_id}")
    async def delete_entry(entry_id: int, request: Request) -> dict[str, str]:
        """Delete an entry."""
        state_container: AppContainer = request.app.state.container
        if not state_container.meal_log_service.delete_entry(entry_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "deleted"}

    @app.get("/summary/{day}")
    async def daily_summary(day: date, request: Request) -> dict[str, object]:
        """Return totals for a day against the current calorie goal."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.meal_log_service.daily_summary(
            day, state_container.profile_service.daily_kcal_goal()
        )
        return jsonable_encoder(summary)

    @app.post("/profile")
    async def save_profile(body: ProfileRequest, request: Request) -> dict[str, object]:
        """Replace the current profile and return its derived figures."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.profile_service.save(
            body.to_biometrics(), body.to_goal()
        )
        return jsonable_encoder(summary)

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the current profile."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.profile_service.current()
        if summary is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return jsonable_encoder(summary)

    @app.post("/energy/bmi")
    async def bmi(body: BmiRequest) -> dict[str, object]:
        """Return BMI, its category and the healthy weight range."""
        result = compute_bmi(body.weight_kg, body.height_cm)
        return {
            "bmi": result.bmi,
            "category": result.category,
            "ideal_weight": jsonable_encoder(ideal_weight_range(body.height_cm)),
        }

    return app


def _classify_payload(
    container: AppContainer, payload: bytes
) -> list[ClassificationCandidate]:
    validate_image_upload(payload)
    return container.classifier_service.classify(decode_image(payload))


def _require_food(container: AppContainer, food_id: str) -> NutrientProfile:
    food = container.catalog_service.get(food_id)
    if food is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Unknown food"
        )
    return food


def _status_for(exc: CalcamError) -> int:
    """Map core error kinds onto HTTP status codes."""
    if isinstance(exc, ModelLoadError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, InferenceError | HandleDisposed):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_422_UNPROCESSABLE_ENTITY
