"""Core FastAPI application utilities shared across the site."""

import logging
import pathlib
from typing import Any

import fastapi
import fastapi.templating

import common.settings

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class HealthCheckFilter(logging.Filter):
    """Filter out health check requests from uvicorn access logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False to suppress health check log entries."""
        return '/health' not in record.getMessage()


def configure_logging(level: str = 'INFO') -> None:
    """Configure root logging and suppress health check access entries."""
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    logging.getLogger('uvicorn.access').addFilter(HealthCheckFilter())


# ---------------------------------------------------------------------------
# Health router
# ---------------------------------------------------------------------------

_health_router = fastapi.APIRouter()


@_health_router.api_route('/health', methods=['GET', 'HEAD'])
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {'status': 'healthy'}


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def get_settings(request: fastapi.Request) -> common.settings.Settings:
    """FastAPI dependency returning the settings the app was created with."""
    return request.app.state.settings


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


def make_templates(
    directory: pathlib.Path | str,
    settings: common.settings.Settings,
) -> fastapi.templating.Jinja2Templates:
    """Create a Jinja2Templates instance with domain and home_url globals pre-set."""
    templates = fastapi.templating.Jinja2Templates(directory=str(directory))
    templates.env.globals['domain'] = settings.domain  # type: ignore[reportUnknownMemberType]
    templates.env.globals['home_url'] = settings.home_url  # type: ignore[reportUnknownMemberType]
    templates.env.globals['site_title'] = settings.site_title  # type: ignore[reportUnknownMemberType]
    return templates


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    title: str, settings: common.settings.Settings, **kwargs: Any
) -> fastapi.FastAPI:
    """Create a FastAPI app with health endpoint, logging and settings configured.

    Additional keyword arguments are forwarded to FastAPI.__init__ (e.g. lifespan).
    """
    app = fastapi.FastAPI(title=title, **kwargs)
    configure_logging(settings.log_level)
    app.state.settings = settings
    app.include_router(_health_router)
    return app
