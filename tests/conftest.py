"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import pytest

from calcam.adapters.assets import _profile_from_row
from calcam.adapters.memory_repositories import (
    InMemoryFoodRepository,
    InMemoryMealLogRepository,
    InMemoryProfileRepository,
)
from calcam.config import Settings
from calcam.containers import AppContainer
from calcam.domain.nutrition import NutrientProfile
from calcam.domain.vision import Bitmap
from calcam.services.catalog import FoodCatalogService
from calcam.services.classifier import FoodClassifierService, ModelProvider
from calcam.services.inference import InferenceExecutor, InferenceSession, SessionFactory
from calcam.services.meals import MealLogService
from calcam.services.postprocessing import sequential_nutrient_ref
from calcam.services.profile import ProfileService

LABELS = ["Shrimp fried rice", "Pad thai", "Tom yum goong"]

FOOD_ROWS = [
    {
        "id": "th_001",
        "name_th": "ข้าวผัดกุ้ง",
        "name_en": "Shrimp fried rice",
        "category": "rice",
        "kcal_per_100g": 163,
        "protein": 6.8,
        "carb": 24.5,
        "fat": 4.2,
        "fiber": 0.8,
        "tags": ["shrimp", "fried"],
    },
    {
        "id": "th_002",
        "name_th": "ผัดไทย",
        "name_en": "Pad thai",
        "category": "noodle",
        "kcal_per_100g": 170,
        "protein": 7.4,
        "carb": 25.1,
        "fat": 4.6,
        "fiber": 1.1,
        "tags": ["noodle", "peanut"],
    },
    {
        "id": "th_003",
        "name_th": "ต้มยำกุ้ง",
        "name_en": "Tom yum goong",
        "category": "soup",
        "kcal_per_100g": 45,
        "protein": 5.2,
        "carb": 2.9,
        "fat": 1.5,
        "fiber": 0.4,
        "tags": ["spicy", "shrimp"],
    },
]


@dataclass
class FakeSession(InferenceSession):
    """Fake inference session returning fixed scores."""

    scores: list[float] = field(default_factory=lambda: [2.0, 1.0, 0.1])
    declared_size: int | None = 3
    fail_run: bool = False
    inputs: list[np.ndarray] = field(default_factory=list)
    released: bool = False

    def output_size(self) -> int | None:
        return self.declared_size

    def run(self, data: np.ndarray) -> np.ndarray:
        if self.fail_run:
            raise RuntimeError("kernel crashed")
        self.inputs.append(data)
        return np.asarray([self.scores], dtype=np.float32)

    def release(self) -> None:
        self.released = True


@dataclass
class FakeSessionFactory(SessionFactory):
    """Session factory that fails for selected backends."""

    failing: set[str] = field(default_factory=set)
    session: FakeSession = field(default_factory=FakeSession)
    created: list[str] = field(default_factory=list)

    def create(self, model_path: str, backend: str) -> FakeSession:
        self.created.append(backend)
        if backend in self.failing:
            raise RuntimeError(f"{backend} unavailable")
        return self.session


def solid_bitmap(
    width: int, height: int, rgba: tuple[int, int, int, int] = (255, 0, 0, 255)
) -> Bitmap:
    return Bitmap(width=width, height=height, pixels=bytes(rgba) * (width * height))


def sample_foods() -> list[NutrientProfile]:
    return [_profile_from_row(row) for row in FOOD_ROWS]


@pytest.fixture
def foods() -> list[NutrientProfile]:
    return sample_foods()


@pytest.fixture
def asset_paths(tmp_path: Path) -> dict[str, Path]:
    labels_path = tmp_path / "food-labels.json"
    labels_path.write_text(json.dumps({"labels": LABELS}), encoding="utf-8")
    foods_path = tmp_path / "foods.seed.json"
    foods_path.write_text(
        json.dumps({"foods": FOOD_ROWS}, ensure_ascii=False), encoding="utf-8"
    )
    return {"labels": labels_path, "foods": foods_path}


@pytest.fixture
def settings(asset_paths: dict[str, Path]) -> Settings:
    return Settings(
        model_path="model.onnx",
        labels_path=str(asset_paths["labels"]),
        foods_path=str(asset_paths["foods"]),
        input_size=8,
        backends="cuda,cpu",
    )


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def container(
    settings: Settings, session_factory: FakeSessionFactory
) -> AppContainer:
    executor = InferenceExecutor(
        session_factory=session_factory,
        backends=["cuda", "cpu"],
        input_size=settings.input_size,
    )
    model_provider = ModelProvider(
        executor=executor,
        model_path=settings.model_path,
        labels_loader=lambda: list(LABELS),
    )
    classifier_service = FoodClassifierService(
        model=model_provider,
        top_k=settings.top_k,
        threshold=settings.threshold,
        nutrient_ref=sequential_nutrient_ref(),
    )
    catalog_service = FoodCatalogService(InMemoryFoodRepository(sample_foods()))
    meal_log_service = MealLogService(repository=InMemoryMealLogRepository())
    profile_service = ProfileService(InMemoryProfileRepository())

    return AppContainer(
        settings=settings,
        model_provider=model_provider,
        classifier_service=classifier_service,
        catalog_service=catalog_service,
        meal_log_service=meal_log_service,
        profile_service=profile_service,
        close_resources=model_provider.close,
    )
