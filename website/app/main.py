"""FastAPI application for the personal website and blog."""

import pathlib

import fastapi
import fastapi.staticfiles

import common.app
import common.settings

from .. import build_id
from . import postprocess
from .routers import api, pages

APP_DIR = pathlib.Path(__file__).resolve().parent


def create_app(settings: common.settings.Settings) -> fastapi.FastAPI:
    """Build the site application around the given settings."""
    app = common.app.create_app('Pilcrow', settings)

    app.add_middleware(postprocess.ResponsePostProcessor)
    app.mount(
        '/assets',
        fastapi.staticfiles.StaticFiles(directory=APP_DIR / 'static'),
        name='assets',
    )

    templates = common.app.make_templates(APP_DIR / 'templates', settings)
    templates.env.filters['datefmt'] = lambda value, fmt='%B %d, %Y': value.strftime(fmt)  # type: ignore[assignment]
    templates.env.globals['build_id'] = build_id.read_build_id(settings.build_id_path)  # type: ignore[reportUnknownMemberType]
    app.state.templates = templates

    app.include_router(pages.router)
    app.include_router(api.router)
    return app


app = create_app(common.settings.load_settings())
