import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install the root log handler once."""
    if level is None:
        from app.config import settings

        level = settings.log_level
    root = logging.getLogger()
    if not any(getattr(h, "_onu_monitor", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._onu_monitor = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level.upper())
