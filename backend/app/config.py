from pydantic_settings import BaseSettings
from functools import lru_cache

DEFAULT_SECRET_KEY = "change-me"


class Settings(BaseSettings):
    env: str = "dev"
    database_url: str = "sqlite:///./data/tripboard.db"

    secret_key: str = DEFAULT_SECRET_KEY
    jwt_algorithm: str = "HS256"

    # Session lifetime; "remember me" extends it to remember_me_days
    session_max_age_hours: int = 2
    remember_me_days: int = 30

    bcrypt_rounds: int = 12

    geocoder_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    geocoder_api_key: str = ""
    geocoder_timeout: float = 10.0

    def model_post_init(self, __context):
        if self.env == "prod" and self.database_url.startswith("sqlite"):
            raise ValueError(
                "Production requires explicit DATABASE_URL (not SQLite)"
            )
        if self.env == "prod" and self.secret_key == DEFAULT_SECRET_KEY:
            raise ValueError("Production requires an explicit SECRET_KEY")

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
