from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "development"
    APP_PORT: int = 8005

    # Smart-Add LLM (can be changed easily)
    LLM_API_KEY: str = ""
    LLM_PROVIDER: str = "openai"  # openai, anthropic, google_genai, etc.
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.1

    # Local key-value storage
    STORAGE_PATH: str = "data/agenda.json"

    # Agenda behaviour
    AGENDA_TIMEZONE: str = "America/Belem"
    REMINDER_POLL_SECONDS: float = 15.0
    DEFAULT_REMINDER_MINUTES: int = 60
    SEED_DEFAULT_EVENTS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()


def validate_required_keys():
    """Validate that all required API keys are present"""
    required_keys = [
        ("LLM_API_KEY", settings.LLM_API_KEY),
    ]

    missing_keys = []
    for key_name, key_value in required_keys:
        if not key_value or key_value.strip() == "":
            missing_keys.append(key_name)

    if missing_keys:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_keys)}. "
            f"Please check your .env file."
        )
