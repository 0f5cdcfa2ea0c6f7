from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "OnboardingHub"
    max_upload_bytes: int = 25 * 1024 * 1024  # 25 MiB
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    # Base for public storage URLs handed back to callers.
    public_base_url: str = "http://127.0.0.1:8000"
    # Front-end origin; signing links are built as {app_base_url}/#/sign/<id>.
    app_base_url: str = "http://localhost:5173"
    cors_origins: list[str] = [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]

    openai_api_key: str | None = None
    openai_model: str = "gpt-4"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 1200
    insight_model: str = "gpt-4o-mini"

    resend_api_key: str | None = None
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = "Onboarding Hub <onboarding@example.com>"
    http_timeout_seconds: float = 30.0

    # Deleting a client always cascades rows at the database level. This flag
    # decides whether deliverable files in storage are purged along with them.
    purge_deliverable_files_on_client_delete: bool = True

    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        return self.data_path / "db.sqlite"

    @property
    def storage_path(self) -> Path:
        return self.data_path / "storage"

    model_config = {"env_prefix": "ONBOARDING_"}


settings = Settings()
