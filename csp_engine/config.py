from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "CSP_ENGINE_", "case_sensitive": False}

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Schedules
    lookup_epsilon_hours: float = 1.0e-6
    default_is_leapyear: bool = False

    # Reported outputs
    fill_missing_with_last: bool = True


settings = Settings()
