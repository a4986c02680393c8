'''
Holds all the configurations
'''
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """
    Manages application configuration using environment variables.
    """
    # Application Metadata
    APP_NAME: str = "Tuition Timetable"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Timetable resolution and room-conflict detection for a tuition center."
    TEST_MODE: bool = False

    # Database URL
    DATABASE_URL_PROD: str = "postgresql+asyncpg://localhost:5432/tuition_timetable"
    DATABASE_URL_TEST: str = "postgresql+asyncpg://localhost:5432/tuition_timetable_test"
    @property
    def database_url(self) -> str:
        """
        Dynamically returns the correct database URL based on the test_mode flag.
        """
        if self.TEST_MODE:
            return self.DATABASE_URL_TEST
        return self.DATABASE_URL_PROD

    BACKEND_CORS_ORIGINS: list[str] = []

    # Scheduling settings
    FIRST_DAY_OF_WEEK: int = Field(0, ge=0, le=6)  # 0 is Sunday
    WILDCARD_CLASS: str = "All"
    OCCUPANCY_GRID_FIRST_HOUR: int = Field(7, ge=0, le=22)
    OCCUPANCY_GRID_LAST_HOUR: int = Field(22, ge=0, le=22)

    class Config:
        env_file = ".env" # automatically loads the .env

# Create a single, importable instance of the settings
settings = Settings()
