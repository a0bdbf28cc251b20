from threading import Lock

from app.config import settings
from app.services.olt.service import OnuService, build_onu_service

_onu_service: OnuService | None = None
_onu_service_lock = Lock()


def get_onu_service() -> OnuService:
    """Return the process-wide ONU service, building it on first use."""
    global _onu_service
    if _onu_service is None:
        with _onu_service_lock:
            if _onu_service is None:
                _onu_service = build_onu_service(settings)
    return _onu_service


__all__ = ["get_onu_service"]
