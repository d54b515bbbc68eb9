from prometheus_fastapi_instrumentator import Instrumentator

from . import create_app
from .core.config import get_settings
from .core.logging import configure_logging

settings = get_settings()
configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
app = create_app(settings)
Instrumentator(excluded_handlers=["/health", "/metrics", "/static.*"]).instrument(app).expose(
    app, include_in_schema=False
)
