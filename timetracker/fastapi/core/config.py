from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Employee Time Tracker"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Database URL (read from .env file)
    DATABASE_URL: str = ''

    # Seconds to wait for a pooled connection before the store is reported unavailable
    DB_POOL_TIMEOUT: int = 10

    # JWT Authentication settings
    JWT_SECRET_KEY: str = 'default-secret-key-change-in-production'
    JWT_ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Client URL for CORS
    CLIENT_URL: str = 'http://localhost:3000'
    ADDITIONAL_CORS_ORIGINS: str = ''

    # Admin account seeded at startup when no admin exists
    INITIAL_ADMIN_EMAIL: str = 'admin@timetracker.local'
    INITIAL_ADMIN_PASSWORD: str = 'admin123456'

    # Maximum number of records returned by the admin listing
    ADMIN_RECORDS_LIMIT: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

    @property
    def DB_URL(self):
        if self.ENV_MODE == "dev":
            return self.DEV_DB_URL
        else:
            if self.DATABASE_URL:
                return self.DATABASE_URL
            else:
                return '{}://{}:{}@{}:{}/{}'.format(
                    self.DB_ENGINE,
                    self.DB_USERNAME,
                    self.DB_PASS,
                    self.DB_HOST,
                    self.DB_PORT,
                    self.DB_NAME
                )

    @property
    def CORS_ORIGINS(self) -> list:
        origins = [
            self.CLIENT_URL,
            "http://localhost",
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:8000",
        ]
        if self.ADDITIONAL_CORS_ORIGINS:
            origins.extend(origin.strip() for origin in self.ADDITIONAL_CORS_ORIGINS.split(","))
        # Remove empty strings and duplicates, keeping order
        return list(dict.fromkeys(origin for origin in origins if origin))

class DevSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'dev'

    @property
    def DEV_DB_URL(self) -> str:
        # Fall back to a local SQLite file when no DATABASE_URL is configured
        return self.DATABASE_URL if self.DATABASE_URL else "sqlite:///./dev.db"

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

class ProdSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'prod'

    # Database settings for production
    DB_ENGINE: str = 'postgresql+psycopg'
    DB_USERNAME: str = ''
    DB_PASS: str = ''
    DB_HOST: str = ''
    DB_PORT: str = ''
    DB_NAME: str = ''

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

def get_settings(env_mode: str = "dev"):
    if env_mode == "dev":
        return DevSettings()
    return ProdSettings()
