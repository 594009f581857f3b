"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from calcam.adapters.assets import load_food_profiles, load_labels
from calcam.adapters.memory_repositories import (
    InMemoryFoodRepository,
    InMemoryMealLogRepository,
    InMemoryProfileRepository,
)
from calcam.adapters.onnx_runtime import OnnxRuntimeSessionFactory
from calcam.config import Settings, parse_backends
from calcam.services.catalog import FoodCatalogService
from calcam.services.classifier import FoodClassifierService, ModelProvider
from calcam.services.energy import BiometricLimits
from calcam.services.inference import InferenceExecutor, SessionFactory
from calcam.services.meals import MealLogService
from calcam.services.postprocessing import sequential_nutrient_ref
from calcam.services.profile import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    model_provider: ModelProvider
    classifier_service: FoodClassifierService
    catalog_service: FoodCatalogService
    meal_log_service: MealLogService
    profile_service: ProfileService
    close_resources: Callable[[], None]


def build_container(
    settings: Settings | None = None,
    session_factory: SessionFactory | None = None,
) -> AppContainer:
    """Create the default dependency container.

    The model is not loaded here; ``model_provider`` loads it on the first
    classification and keeps the handle for the life of the process.
    """
    resolved_settings = settings or Settings()
    executor = InferenceExecutor(
        session_factory=session_factory or OnnxRuntimeSessionFactory(),
        backends=parse_backends(resolved_settings.backends),
        input_size=resolved_settings.input_size,
    )
    model_provider = ModelProvider(
        executor=executor,
        model_path=resolved_settings.model_path,
        labels_loader=partial(load_labels, resolved_settings.labels_path),
    )
    classifier_service = FoodClassifierService(
        model=model_provider,
        top_k=resolved_settings.top_k,
        threshold=resolved_settings.threshold,
        channel_means=resolved_settings.channel_means,
        channel_stds=resolved_settings.channel_stds,
        nutrient_ref=sequential_nutrient_ref(
            resolved_settings.nutrient_id_prefix,
            resolved_settings.nutrient_id_width,
        ),
    )
    catalog_service = FoodCatalogService(
        InMemoryFoodRepository(load_food_profiles(resolved_settings.foods_path))
    )
    meal_log_service = MealLogService(repository=InMemoryMealLogRepository())
    profile_service = ProfileService(
        repository=InMemoryProfileRepository(),
        limits=BiometricLimits(
            max_age_years=resolved_settings.max_age_years,
            max_weight_kg=resolved_settings.max_weight_kg,
            max_height_cm=resolved_settings.max_height_cm,
        ),
        default_daily_kcal_goal=resolved_settings.default_daily_kcal_goal,
    )

    return AppContainer(
        settings=resolved_settings,
        model_provider=model_provider,
        classifier_service=classifier_service,
        catalog_service=catalog_service,
        meal_log_service=meal_log_service,
        profile_service=profile_service,
        close_resources=model_provider.close,
    )
