"""Runtime configuration.

Values come from environment variables prefixed with `ENERGY_DASHBOARD_`
(or a `.env` file), e.g. `ENERGY_DASHBOARD_PREDICTION_URL`.
"""
from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ENERGY_DASHBOARD_",
        env_file=".env",
        extra="ignore",
        protected_namespaces=(),
    )

    data_dir: Path = Field(default=Path("data"))
    dataset_file: str = Field(default="df_dataset_unidos5.csv")
    model_metrics_file: str = Field(default="metricas_modelo.json")
    prediction_results_file: str = Field(default="resultado_modelo.csv")
    entity_metrics_file: str = Field(default="metrics_by_company.csv")
    train_test_file: str = Field(default="data_train_test_20250601_175314.json")
    geojson_file: str = Field(default="mapa.json")

    prediction_url: str = Field(default="http://127.0.0.1:5001/predict")
    prediction_timeout: float = Field(default=30.0, gt=0)

    top_n_entities: int = Field(default=15, ge=1)

    log_level: str = Field(default="INFO")


def get_settings() -> Settings:
    return Settings()
