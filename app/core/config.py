"""
Core Configuration Module

Centralizes environment configuration for the scheduling recommendation service.
Provides a singleton Settings object with defaults aligned to the service clients.

Usage:
    from app.core.config import settings

    print(settings.APP_ENV)
    print(settings.CONTRACTOR_SERVICE_URL)
"""

import os
from typing import List, Optional


class Settings:
    """
    Application settings loaded from environment variables.

    Values are read on access, so tests can monkeypatch the environment
    without rebuilding the singleton.
    """

    # ==================== Application Settings ====================

    @property
    def APP_ENV(self) -> str:
        """Application environment: dev, staging, production"""
        return os.getenv("APP_ENV", "dev")

    @property
    def LOG_LEVEL(self) -> str:
        """Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"""
        return os.getenv("LOG_LEVEL", "INFO")

    # ==================== Service URLs ====================

    @property
    def CONTRACTOR_SERVICE_URL(self) -> str:
        """Contractor directory service URL (aligns with contractor_service_client.py)"""
        return os.getenv("CONTRACTOR_SERVICE_URL", "http://localhost:3001")

    @property
    def AVAILABILITY_SERVICE_URL(self) -> str:
        """Availability calendar service URL (aligns with availability_service_client.py)"""
        return os.getenv("AVAILABILITY_SERVICE_URL", "http://localhost:3002")

    # ==================== HTTP Client Settings ====================

    @property
    def DEFAULT_CLIENT_TIMEOUT(self) -> float:
        """Default HTTP client timeout in seconds"""
        return float(os.getenv("DEFAULT_CLIENT_TIMEOUT", "10.0"))

    @property
    def DEFAULT_CLIENT_MAX_CONNECTIONS(self) -> int:
        """Default maximum HTTP connections in pool"""
        return int(os.getenv("DEFAULT_CLIENT_MAX_CONNECTIONS", "50"))

    @property
    def DEFAULT_CLIENT_MAX_KEEPALIVE(self) -> int:
        """Default maximum keepalive connections in pool"""
        return int(os.getenv("DEFAULT_CLIENT_MAX_KEEPALIVE", "10"))

    @property
    def CONTRACTOR_CLIENT_TIMEOUT(self) -> float:
        """Contractor service client timeout"""
        return float(os.getenv("CONTRACTOR_CLIENT_TIMEOUT", str(self.DEFAULT_CLIENT_TIMEOUT)))

    @property
    def AVAILABILITY_CLIENT_TIMEOUT(self) -> float:
        """Availability service client timeout"""
        return float(os.getenv("AVAILABILITY_CLIENT_TIMEOUT", str(self.DEFAULT_CLIENT_TIMEOUT)))

    # ==================== CORS Settings ====================

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Allowed CORS origins"""
        origins_str = os.getenv("CORS_ORIGINS", "*")
        if origins_str == "*":
            return ["*"]
        return [origin.strip() for origin in origins_str.split(",")]

    @property
    def CORS_ALLOW_CREDENTIALS(self) -> bool:
        """Allow credentials in CORS requests"""
        return os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"

    # ==================== Recommendation Tuning ====================

    @property
    def RECOMMENDATION_WEIGHT_AVAILABILITY(self) -> float:
        """Weight of the availability sub-score in the composite"""
        return float(os.getenv("RECOMMENDATION_WEIGHT_AVAILABILITY", "0.40"))

    @property
    def RECOMMENDATION_WEIGHT_DISTANCE(self) -> float:
        """Weight of the distance sub-score in the composite"""
        return float(os.getenv("RECOMMENDATION_WEIGHT_DISTANCE", "0.35"))

    @property
    def RECOMMENDATION_WEIGHT_RATING(self) -> float:
        """Weight of the rating sub-score in the composite"""
        return float(os.getenv("RECOMMENDATION_WEIGHT_RATING", "0.25"))

    @property
    def DEFAULT_SERVICE_RADIUS_MILES(self) -> float:
        """Service radius applied when a contractor has not set one"""
        return float(os.getenv("DEFAULT_SERVICE_RADIUS_MILES", "30"))

    @property
    def DEFAULT_RECOMMENDATION_LIMIT(self) -> int:
        """How many recommendations the API returns when no limit is given"""
        return int(os.getenv("DEFAULT_RECOMMENDATION_LIMIT", "5"))


# ==================== Singleton Instance ====================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the singleton Settings instance.

    Returns:
        Settings object with configuration values

    Example:
        >>> from app.core.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.APP_ENV)
        'dev'
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


# Convenience singleton for direct import
settings = get_settings()
