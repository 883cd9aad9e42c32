import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SESSION_TOKEN = "dev-session-token"


class Config(BaseModel):
    app_name: str = "Company Intranet"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    port: int = int(os.getenv("PORT", "8080"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./intranet.db")

    # Auth
    # Static placeholder handed out at login; it is not verified by the API.
    session_token: str = os.getenv("SESSION_TOKEN", DEFAULT_SESSION_TOKEN)

    # Bootstrap
    admin_company_name: str = os.getenv("ADMIN_COMPANY_NAME", "Admin")
    allow_startup_migrations: bool = os.getenv("ALLOW_STARTUP_MIGRATIONS", "true").lower() == "true"

    # Listing caps
    forum_page_size: int = int(os.getenv("FORUM_PAGE_SIZE", "100"))
    admin_recent_posts: int = 12
    admin_recent_messages: int = 20

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv("CLIENT_ORIGIN", "http://localhost:5173").split(",")
            if o.strip()
        ]
    )


settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if settings.session_token == DEFAULT_SESSION_TOKEN:
        raise RuntimeError(
            "FATAL: SESSION_TOKEN must be set for non-development environments. "
            "Set it as an environment variable."
        )
elif settings.session_token == DEFAULT_SESSION_TOKEN:
    _logger.warning("Using the default SESSION_TOKEN; only acceptable in development.")
