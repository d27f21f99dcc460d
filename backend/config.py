import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:3000",
]


@dataclass
class Config:
    mongodb_uri: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    db_name: str = os.getenv("DB_NAME", "freelanceMarketplace")
    port: int = int(os.getenv("PORT", "5000"))
    client_url: Optional[str] = os.getenv("CLIENT_URL") or None
    app_env: str = os.getenv("APP_ENV", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    mongo_timeout_ms: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))
    extra_origins: List[str] = field(default_factory=lambda: list(DEV_ORIGINS))

    @property
    def cors_origins(self) -> List[str]:
        origins = [self.client_url] if self.client_url else []
        return origins + self.extra_origins

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"
