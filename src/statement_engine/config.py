from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent.parent / ".env"),
        env_prefix="STATEMENT_ENGINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Extraction
    pdf_max_size_mb: int = 25
    extraction_strategy: str = "auto"

    # Parsing defaults (see ParserConfig.from_settings)
    strict_filtering: bool = True
    min_description_length: int = 2
    max_description_length: int = 200
    decimal_separator: str | None = None
    thousands_separator: str | None = None


settings = Settings()
