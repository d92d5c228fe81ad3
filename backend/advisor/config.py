from typing import Literal

from pydantic_settings import BaseSettings

CATALOG_MAX_PAGE_SIZE = 25


class Settings(BaseSettings):
    model_config = {
        "env_file": "../.env",
        "extra": "ignore",
        "env_prefix": "",
        "case_sensitive": False,
    }

    # Product catalog
    catalog_mode: Literal["mock", "live"] = "mock"
    catalog_base_url: str = "https://developer.api.walmart.com"
    catalog_search_path: str = "api-proxy/service/affil/product/v2/search"
    catalog_taxonomy_path: str = "api-proxy/service/affil/product/v2/taxonomy"
    catalog_trends_path: str = "api-proxy/service/affil/product/v2/trends"
    catalog_page_size: int = CATALOG_MAX_PAGE_SIZE
    catalog_timeout_seconds: float = 30.0

    # Catalog request signing
    catalog_consumer_id: str = ""
    catalog_key_version: str = ""
    catalog_private_key: str = ""

    # AI APIs
    llm_provider: Literal["anthropic", "gemini"] = "anthropic"
    anthropic_api_key: str = ""
    google_ai_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    gemini_model: str = "gemini-2.5-flash"
    llm_max_tokens: int = 2048

    # Recommendations
    max_results: int = 5

    # App
    environment: str = "development"
    log_level: str = "INFO"
    log_file: str = ""

    @property
    def signing_configured(self) -> bool:
        """All three catalog credentials are needed to sign a request."""
        return bool(
            self.catalog_consumer_id and self.catalog_key_version and self.catalog_private_key
        )

    @property
    def llm_configured(self) -> bool:
        if self.llm_provider == "gemini":
            return bool(self.google_ai_api_key)
        return bool(self.anthropic_api_key)


settings = Settings()
