import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw.replace(",", "."))
    except ValueError:
        return None


class Settings:
    def __init__(self) -> None:
        self.APP_NAME: str = os.getenv("APP_NAME", "Painel Administrativo")
        self.ENV: str = os.getenv("ENV", "development")
        self.LOCAL_STORE: bool = os.getenv("LOCAL_STORE", "0") == "1"
        self.LOCAL_USER_NAME: str = os.getenv("LOCAL_USER_NAME", "Tecnico local")

        self.FIREBASE_PROJECT_ID: Optional[str] = os.getenv("FIREBASE_PROJECT_ID")
        self.GOOGLE_MAPS_API_KEY: Optional[str] = os.getenv("GOOGLE_MAPS_API_KEY") or None
        self.MAPS_TIMEOUT_SECONDS: float = float(os.getenv("MAPS_TIMEOUT_SECONDS", "10"))
        self.TECH_BASE_LAT: Optional[float] = _optional_float("TECH_BASE_LAT")
        self.TECH_BASE_LNG: Optional[float] = _optional_float("TECH_BASE_LNG")

        self.COLLECTION_CUSTOMERS: str = os.getenv("COLLECTION_CUSTOMERS", "clientes")
        self.COLLECTION_MACHINES: str = os.getenv("COLLECTION_MACHINES", "maquinas")
        self.COLLECTION_SERVICE_REPORTS: str = os.getenv("COLLECTION_SERVICE_REPORTS", "relatorios")
        self.COLLECTION_PAINTS: str = os.getenv("COLLECTION_PAINTS", "tintas")
        self.COLLECTION_SOLVENTS: str = os.getenv("COLLECTION_SOLVENTS", "solventes")

        default_cors = [
            "http://localhost",
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]
        cors_origins = os.getenv("BACKEND_CORS_ORIGINS")
        self.BACKEND_CORS_ORIGINS: List[str] = (
            [origin.strip() for origin in cors_origins.split(",") if origin.strip()]
            if cors_origins
            else default_cors
        )

    @property
    def tech_base(self) -> Optional[tuple[float, float]]:
        if self.TECH_BASE_LAT is None or self.TECH_BASE_LNG is None:
            return None
        return (self.TECH_BASE_LAT, self.TECH_BASE_LNG)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
