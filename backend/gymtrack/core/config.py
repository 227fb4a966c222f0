from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    APP_NAME: str = "GymTrack"
    DEBUG: bool = False

    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/gymtrack.db")

    @property
    def DATABASE_URL(self) -> str:
        # Always resolve path relative to backend directory, not current working directory
        db_path = self.DATABASE_PATH
        if not os.path.isabs(db_path):
            backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
            db_path = os.path.join(backend_dir, db_path)
        return f"sqlite:///{os.path.abspath(db_path)}"

    # Attendance policy
    MIN_STAY_MINUTES: int = 10

    # Member id allocation (random 6-digit ids)
    MEMBER_ID_MIN: int = 100000
    MEMBER_ID_MAX: int = 999999
    MEMBER_ID_MAX_ATTEMPTS: int = 100

    # Dashboard
    EXPIRING_SOON_DAYS: int = 7

    HOST: str = "127.0.0.1"
    PORT: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"  # Ignore extra environment variables
    )


settings = Settings()
