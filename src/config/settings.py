from typing import List, Optional

from pydantic_settings import BaseSettings
import os


class Settings(BaseSettings):
    MONGO_URI: Optional[str] = os.getenv("MONGO_URI")
    MONGO_DATABASE: str = os.getenv("MONGO_DATABASE", "yoga-master")

    # Atlas credentials, used only when MONGO_URI is not set
    DB_USER: Optional[str] = os.getenv("DB_USER")
    DB_PASSWORD: Optional[str] = os.getenv("DB_PASSWORD")
    MONGO_HOST: str = os.getenv("MONGO_HOST", "yoga-master.vldmm.mongodb.net")

    CLIENT_ORIGIN: str = os.getenv("CLIENT_ORIGIN", "*")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    PORT: int = int(os.getenv("PORT", "5000"))

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    RATE_LIMITING_ENABLED: bool = False

    DEFAULT_CART_USER: str = "guest"
    CART_WRITE_ATTEMPTS: int = 5

    @property
    def mongo_uri(self) -> str:
        if self.MONGO_URI:
            return self.MONGO_URI
        if self.DB_USER and self.DB_PASSWORD:
            return (
                f"mongodb+srv://{self.DB_USER}:{self.DB_PASSWORD}@{self.MONGO_HOST}/"
                f"?retryWrites=true&w=majority&appName={self.MONGO_DATABASE}"
            )
        return "mongodb://localhost:27017"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CLIENT_ORIGIN.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# create a singleton instance
settings = Settings()
