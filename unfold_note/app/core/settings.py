import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    def __init__(self):
        self.app_name = "Unfold Note"
        self.api_version = "1.0.0"
        self.environment = os.getenv("UNFOLD_ENVIRONMENT", "development")
        self.secret_key = os.getenv("UNFOLD_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("UNFOLD_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.auth_code_expire_minutes = int(os.getenv("UNFOLD_AUTH_CODE_EXPIRE_MINUTES", "5"))
        self.database_url = os.getenv("UNFOLD_DATABASE_URL", "sqlite:///./unfold_note.db")
        self.storage_dir = os.getenv("UNFOLD_STORAGE_DIR", "./storage")
        self.public_base_url = os.getenv("UNFOLD_PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
        self.default_bucket = "notes"
        self.enforce_allowed_emails = _env_bool("UNFOLD_ENFORCE_ALLOWED_EMAILS", True)
        self.cors_origins = _env_list(
            "UNFOLD_CORS_ORIGINS",
            ["http://localhost:3000", "http://127.0.0.1:3000"],
        )
        self.log_level = os.getenv("UNFOLD_LOG_LEVEL", "INFO").upper()
        self.dev_admin_email = os.getenv("UNFOLD_DEV_ADMIN_EMAIL")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
