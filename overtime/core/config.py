from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SUPERVISOR = "JEFE DE OPERACIONES"


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Registro de Horas Extras"
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")

    roster_source: str = Field(
        default="assets/trabajadores_maestro.csv",
        description="URL or local path of the employee roster CSV",
    )
    storage_path: Path = Field(default=Path("data/storage.json"), description="Local key-value storage file")
    ledger_key: str = "horasExtrasData"
    storage_quota_bytes: int | None = Field(
        default=5 * 1024 * 1024,
        description="Maximum size of the storage file; None disables the limit",
    )
    strict_write_through: bool = Field(
        default=False,
        description="Roll the in-memory ledger back when persisting a mutation fails",
    )
    audit_log_path: Path | None = Field(default=Path("data/audit_log.jsonl"))

    supervisor: str = SUPERVISOR
    designated_coordinators: str = Field(
        default=SUPERVISOR,
        description="Comma separated coordinators offered even when the roster does not name them",
    )

    model_config = SettingsConfigDict(env_prefix="OVERTIME_", extra="ignore")

    @field_validator("supervisor")
    @classmethod
    def strip_supervisor(cls, value: str) -> str:
        return value.strip()

    @property
    def coordinators(self) -> list[str]:
        return [name.strip() for name in self.designated_coordinators.split(",") if name.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve the .env file next to the project root if it exists."""
    default_file = BASE_DIR / ".env"
    if default_file.exists():
        return str(default_file)
    return None
