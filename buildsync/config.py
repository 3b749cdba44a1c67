from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # Storage service (credentials are optional here; the library API takes them explicitly)
    storage_client_type: str = "sauce"  # Client key resolved by get_storage_client()
    storage_base_url: str = "https://saucelabs.com"
    storage_account: str = ""
    storage_access_key: str = ""

    # Timeouts (seconds)
    inventory_timeout_s: float = 15.0
    upload_timeout_s: float = 180.0

    # Reference returned to callers: "<prefix>:<name>"
    reference_prefix: str = "storage"

    # Observability
    otel_exporter: str = "none"
    otel_service_name: str = "build-sync"
    otel_exporter_otlp_endpoint: str = "http://localhost:4317"

    @computed_field
    @property
    def storage_api_root(self) -> str:
        """
        Base URL of the storage REST API, without a trailing slash.
        """
        return f"{self.storage_base_url.rstrip('/')}/rest/v1/storage"


settings = Settings()
