"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class MailConfig(BaseSettings):
    """Outbound notification settings (MAIL_* environment variables)."""

    provider: str = "smtp"  # smtp | resend
    host: str = ""
    port: int = 587
    user: str = ""
    password: str = ""
    secure: bool = False
    resend_api_key: str = ""
    sender: str = Field(default="cirs@localhost", alias="MAIL_FROM")
    to: str = ""
    timeout: float = 10.0
    subject_prefix: str = "CIRS"

    model_config = {
        "env_prefix": "MAIL_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def recipients(self) -> list[str]:
        return [addr.strip() for addr in self.to.split(",") if addr.strip()]

    @property
    def is_configured(self) -> bool:
        if not self.recipients:
            return False
        if self.provider == "resend":
            return bool(self.resend_api_key)
        return bool(self.host)


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 3000
    db_path: str = "data/cirs.db"
    database_url: str = ""
    log_level: str = "INFO"
    list_limit: int = 500
    timezone: str = ""
    categories: list[str] = Field(default_factory=lambda: [
        "Patient care", "Medication", "Vehicle / equipment",
        "Communication", "Hygiene", "Occupational safety", "Other",
    ])
    mail: MailConfig = Field(default_factory=MailConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.db_path}"


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _yaml
    mail = MailConfig(**y.get("mail", {}))
    top = {k: v for k, v in y.items() if k != "mail"}
    env = Settings()
    # Environment values win over YAML for keys that were set explicitly.
    merged = {**top, **env.model_dump(exclude={"mail"}, exclude_unset=True)}
    return Settings(mail=mail, **merged)
