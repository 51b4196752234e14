from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # urgency thresholds, in hours until expiry
    urgency_high_hours: float = 4.0
    urgency_medium_hours: float = 12.0

    # assign a volunteer in the same call that accepts the donation
    auto_assign_on_accept: bool = False

    # static task placeholders, no routing engine behind them
    task_distance_km: str = "5.2"
    task_estimated_minutes: int = 30
    default_delivery_address: str = "NGO Address"

    seed_demo: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FOODSHARE_", extra="ignore")

settings = Settings()
