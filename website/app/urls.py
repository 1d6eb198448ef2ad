"""URL helpers."""

import fastapi

import common.settings


def get_origin(request: fastapi.Request, settings: common.settings.Settings) -> str:
    """Return the request origin, forcing https outside development."""
    origin = f'{request.url.scheme}://{request.url.netloc}'
    if settings.dev:
        return origin
    return origin.replace('http://', 'https://', 1)
