import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, validate_default=True)

    # OLT SNMP access
    snmp_host: str = Field(default=os.getenv("SNMP_HOST", "127.0.0.1"))
    snmp_port: int = Field(default=int(os.getenv("SNMP_PORT", "161")))
    snmp_community: str = Field(default=os.getenv("SNMP_COMMUNITY", "public"))
    snmp_timeout_seconds: float = Field(default=float(os.getenv("SNMP_TIMEOUT_SECONDS", "10")))
    snmp_retries: int = Field(default=int(os.getenv("SNMP_RETRIES", "2")))

    # Redis cache
    redis_url: str = Field(default=os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    cache_prefix: str = Field(default=os.getenv("ONU_CACHE_PREFIX", ""))
    cache_ttl_seconds: int = Field(default=int(os.getenv("ONU_CACHE_TTL_SECONDS", "300")))

    request_deadline_seconds: float = Field(
        default=float(os.getenv("ONU_REQUEST_DEADLINE_SECONDS", "30"))
    )
    address_table_path: Optional[str] = Field(default=os.getenv("OLT_ADDRESS_TABLE_PATH") or None)

    # Paging
    default_page_size: int = Field(default=int(os.getenv("ONU_DEFAULT_PAGE_SIZE", "10")))
    max_page_size: int = Field(default=int(os.getenv("ONU_MAX_PAGE_SIZE", "100")))

    # Hours added to device timestamps when computing uptime
    clock_correction_hours: float = Field(
        default=float(os.getenv("OLT_CLOCK_CORRECTION_HOURS", "0"))
    )

    # Comma separated list of allowed CORS origins
    cors_allow_origins: str = Field(default=os.getenv("CORS_ALLOW_ORIGINS", "*"))

    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))

    @field_validator("snmp_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("SNMP_PORT must be between 1 and 65535")
        return v

    @field_validator(
        "cache_ttl_seconds", "request_deadline_seconds", "default_page_size", "max_page_size"
    )
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


settings = Settings()
