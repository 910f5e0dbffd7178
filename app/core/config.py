"""
Application configuration using Pydantic Settings
"""

from typing import List, Union
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Settings
    api_title: str = "Pin Relay"
    api_description: str = "Image search relay and same-origin image proxy"
    api_version: str = "1.0.0"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    # Public base URL of this service, used to build proxy links (env: URL)
    url: str = ""

    # Upstream Search Settings
    upstream_search_url: str = (
        "https://www.pinterest.com/resource/BaseSearchResource/get/"
    )
    upstream_timeout: float = 10.0
    upstream_retry_attempts: int = 0
    upstream_retry_backoff: float = 0.5

    # Image Proxy Settings
    allowed_domains: Union[List[str], str] = [
        "pinimg.com",
        "i.pinimg.com",
        "pinterest.com",
    ]
    proxy_default_content_type: str = "image/png"
    # When true, forward the origin's image/* Content-Type instead of the default
    proxy_forward_content_type: bool = False
    # Redirect hops the image proxy follows; each target must pass the allow-list
    proxy_max_redirects: int = 5

    @field_validator("allowed_domains")
    @classmethod
    def parse_allowed_domains(cls, v):
        """Parse allowed domains from a comma-separated string to a list.

        Example:
            >>> parse_allowed_domains("pinimg.com, pinterest.com")
            ['pinimg.com', 'pinterest.com']
        """
        if isinstance(v, str):
            v = v.split(",")
        return [d.strip().lower() for d in v if d and d.strip()]

    # Logging Settings
    log_level: str = "INFO"
    log_format: str = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    log_file: str = "data/app.log"

    # Security Settings
    rate_limit_calls: int = 120
    rate_limit_period: int = 60

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def public_base_url(self) -> str:
        """Base URL without a trailing slash, or "" when unset."""
        return self.url.strip().rstrip("/")

    @property
    def search_configured(self) -> bool:
        return bool(self.public_base_url)


# Global settings instance
settings = Settings()
