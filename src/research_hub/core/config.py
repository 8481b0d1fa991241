from functools import lru_cache
from urllib.parse import urlparse

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Research Hub"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    log_level: str | None = None  # Overrides the DEBUG/INFO default
    enable_openapi: bool = True  # Set to False in production

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance
    allowed_app_url_domains: list[str] = ["localhost", "127.0.0.1"]  # Allowed domains for APP_URL
    csp_production: str = "default-src 'self'; frame-ancestors 'none'"

    # Database
    database_url: str
    database_migrations_url: str | None = None
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100

    # Shutdown
    shutdown_grace_period: int = 30

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Only addresses under this institutional domain may register or sign in
    institution_email_domain: str = "iiitkottayam.ac.in"

    # OAuth (external identity provider, authorization-code flow)
    oauth_token_url: str = "http://localhost:9999/auth/v1/token?grant_type=pkce"
    oauth_client_id: str | None = None
    oauth_client_secret: str | None = None
    oauth_timeout_seconds: int = 10

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("institution_email_domain")
    @classmethod
    def normalize_email_domain(cls, v: str) -> str:
        v = v.strip().lower().lstrip("@")
        if not v or "." not in v:
            raise ValueError("INSTITUTION_EMAIL_DOMAIN must be a domain such as 'example.ac.in'")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, v: str, info: ValidationInfo) -> str:
        """Validate APP_URL is from allowed domain list to prevent open redirects."""
        allowed = info.data.get("allowed_app_url_domains", ["localhost", "127.0.0.1"])
        parsed = urlparse(v)
        hostname = parsed.hostname or ""

        if not any(hostname == domain or hostname.endswith(f".{domain}") for domain in allowed):
            raise ValueError(
                f"APP_URL domain '{hostname}' not in allowed list. "
                f"Add it to ALLOWED_APP_URL_DOMAINS or use: {allowed}"
            )
        return v.rstrip("/")

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Frontend URL used for OAuth redirects
    app_url: str = "http://localhost:3000"

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Object storage (S3-compatible)
    storage_endpoint_url: str | None = None  # For MinIO and other S3-compatible services
    storage_region: str = "us-east-1"
    storage_access_key_id: str | None = None
    storage_secret_access_key: str | None = None
    storage_public_url: str = "http://localhost:9000"
    resume_bucket: str = "resumes"
    document_bucket: str = "documents"

    # Attachment ceilings
    resume_max_bytes: int = 2 * 1024 * 1024
    document_max_bytes: int = 10 * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()
