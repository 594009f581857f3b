"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_path: str = "models/food-classifier.onnx"
    labels_path: str = "models/food-labels.json"
    foods_path: str = "data/foods.seed.json"
    input_size: int = 224
    top_k: int = 5
    threshold: float = 0.1
    channel_means: tuple[float, float, float] = (0.485, 0.456, 0.406)
    channel_stds: tuple[float, float, float] = (0.229, 0.224, 0.225)
    backends: str = "cuda,cpu"
    nutrient_id_prefix: str = "th_"
    nutrient_id_width: int = 3
    max_age_years: int = 120
    max_weight_kg: float = 500
    max_height_cm: float = 300
    default_daily_kcal_goal: int = 2000
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        protected_namespaces=(),
    )


def parse_backends(raw: str | None) -> list[str]:
    """Parse the ordered backend list from env, keeping ``cpu`` as the baseline."""
    names: list[str] = []
    for chunk in (raw or "").split(","):
        value = chunk.strip().lower()
        if value and value not in names:
            names.append(value)
    if "cpu" in names:
        names.remove("cpu")
    names.append("cpu")
    return names
