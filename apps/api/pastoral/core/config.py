from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_env: str = "dev"
    app_name: str = "Pastoral do Batismo"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    database_url: str = "sqlite:///./pastoral.db"

    # External identity provider (Clerk-compatible)
    identity_jwt_key: str = "change-me"  # PEM public key or shared secret
    identity_jwt_algorithms: str = "RS256"  # Comma-separated
    identity_issuer: str = ""  # Empty disables issuer verification
    identity_api_url: str = "https://api.clerk.com/v1"
    identity_secret_key: str = ""
    identity_timeout_seconds: float = 10.0

    # Emails provisioned as ADMIN on first sign-in (comma-separated)
    admin_emails: str = ""

    # Uploads
    upload_backend: str = "local"  # local or s3
    upload_dir: str = "./public/uploads"
    upload_public_base_url: str = "/uploads"
    upload_max_bytes: int = 50 * 1024 * 1024
    upload_allowed_types: str = (
        "application/pdf,image/jpeg,image/png,image/gif,image/webp"
    )

    s3_endpoint: str = "http://minio:9000"
    s3_bucket: str = "pastoral-uploads"
    s3_access_key: str = "minio"
    s3_secret_key: str = "minio123"

    # Owner notifications (webhook receiving {title, content}); empty logs only
    owner_notification_url: str = ""
    owner_notification_token: str = ""

    # Domain defaults
    default_phone_region: str = "BR"
    annual_goal_default: int = 100
    finance_bi_months: int = 6

    # Middleware configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    log_format: str = "json"  # json or text
    enable_request_logging: bool = True
    cors_origins: str = ""  # Comma-separated list of allowed origins
    enable_gzip: bool = True

    # Metrics configuration (EMF logs + OpenTelemetry)
    enable_metrics: bool = True
    metrics_namespace: str = ""  # Defaults to app_name
    otel_service_name: str = ""  # Defaults to app_name
    otel_exporter_otlp_endpoint: str = ""  # e.g. http://localhost:4318

    model_config = {
        "env_file": "../.env",
        "env_file_encoding": "utf-8",
    }

    @property
    def jwt_algorithms(self) -> list[str]:
        return [a.strip() for a in self.identity_jwt_algorithms.split(",") if a.strip()]

    @property
    def admin_email_set(self) -> set[str]:
        return {e.strip().lower() for e in self.admin_emails.split(",") if e.strip()}

    @property
    def allowed_upload_types(self) -> set[str]:
        return {
            t.strip().lower() for t in self.upload_allowed_types.split(",") if t.strip()
        }


settings = Settings()
