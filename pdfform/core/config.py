## pdfform/core/config.py

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """
    Settings for the application
    """

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", case_sensitive=False
    )

    environment: str = "development"
    app_name: str = "PDF Fill-Form Service"
    app_version: str = "1.0"
    allowed_cors_urls: str = "*"
    api_prefix: str = "/api/v1"

    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[str] = None

    # Template storage
    template_storage_backend: str = "local"
    template_dir: str = "template"

    s3_bucket_name: Optional[str] = None
    s3_template_prefix: str = "templates/"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = None

    # Upload validation
    allowed_file_types: str = "pdf"
    allowed_file_size: int = 10240

    fill_font_path: str = str(BASE_DIR / "fonts" / "DejaVuSans.ttf")

    rate_limit_enabled: bool = True
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60

    api_key_required: bool = False
    api_key: Optional[str] = None

    @property
    def cors_origins(self) -> list:
        """
        Allowed CORS origins as a list
        """
        return [origin.strip() for origin in self.allowed_cors_urls.split(",") if origin.strip()]


settings = Settings()
