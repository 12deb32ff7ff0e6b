from pydantic_settings import BaseSettings
from typing import List, Optional

DEFAULT_PARTNER_LOCATIONS = ";".join([
    "Amrik Sukhdev Dhaba, Murthal",
    "Gulshan Ka Dhaba, Ambala",
    "Pahalwan Dhaba, Rohtak",
    "Zhilmil Dhaba, Karnal",
    "Bhartu Da Dhaba, Sonipat",
    "Pehalwan Dhaba, Panipat",
    "Mannat Dhaba, Kurukshetra",
    "Rao Dhaba, Gurgaon",
    "Garam Dharam Dhaba, Murthal",
    "Sitara Dhaba, Panipat",
])

class Settings(BaseSettings):
    # Application metadata
    PROJECT_NAME: str = "Dhaba Ledger"
    PROJECT_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API settings
    API_V1_STR: str = "/api/v1"

    # Database settings
    DATABASE_URL: str
    DATABASE_ECHO: bool = False
    DATABASE_POOL_TIMEOUT: int = 30  # seconds
    AUTO_CREATE_TABLES: bool = True

    # CORS settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # Operator access; unset means the driver routes are open
    OPERATOR_API_KEY: Optional[str] = None

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0
    REDIS_SOCKET_TIMEOUT: int = 5  # seconds
    REDIS_CONNECT_TIMEOUT: int = 5  # seconds
    REDIS_RETRY_ON_TIMEOUT: bool = True

    # Feature flags
    ENABLE_REDIS: bool = False
    ENABLE_CACHING: bool = False
    RESTRICT_TO_PARTNER_LOCATIONS: bool = False

    # Cache settings
    DRIVER_LIST_CACHE_TTL: int = 30  # seconds

    # Partner locations, separated by ";" since names contain commas
    PARTNER_LOCATIONS: str = DEFAULT_PARTNER_LOCATIONS

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse the CORS origins string into a list."""
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def partner_locations_list(self) -> List[str]:
        """Parse the partner locations string into a list."""
        return [name.strip() for name in self.PARTNER_LOCATIONS.split(";") if name.strip()]

    @property
    def cache_enabled(self) -> bool:
        return self.ENABLE_REDIS and self.ENABLE_CACHING

    @property
    def redis_config(self) -> dict:
        """Get Redis configuration as a dictionary."""
        return {
            "url": self.REDIS_URL,
            "password": self.REDIS_PASSWORD,
            "db": self.REDIS_DB,
            "socket_timeout": self.REDIS_SOCKET_TIMEOUT,
            "socket_connect_timeout": self.REDIS_CONNECT_TIMEOUT,
            "retry_on_timeout": self.REDIS_RETRY_ON_TIMEOUT,
        }

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env files

settings = Settings()
