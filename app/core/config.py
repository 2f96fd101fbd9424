from typing import Dict, List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Room Reservation API"
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # Wall clock of the facility; lecture/exam times are anchored to it
    TIMEZONE: str = "Asia/Jakarta"
    DEFAULT_LANGUAGE: str = "en"

    NOW_REFRESH_SECONDS: float = 60.0
    FULL_REFRESH_SECONDS: float = 300.0

    # alternate lecture room spelling -> canonical room name
    ROOM_NAME_ALIASES: Dict[str, str] = {}

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_file = ".env"

settings = Settings()
