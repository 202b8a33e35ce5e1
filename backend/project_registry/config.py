"""
Application configuration
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database (MongoDB)
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "evergreen"
    PROJECT_REF_COLLECTION: str = "project_ref"

    # Remote location of tracked repositories
    GIT_HOST: str = "github.com"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
