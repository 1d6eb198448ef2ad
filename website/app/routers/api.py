"""JSON proxy endpoints over the GitHub API."""

import logging

import fastapi
import fastapi.responses
import httpx
import pydantic

import common.app
import common.settings

from .. import errors, github

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix='/api')

PINNED_CACHE_MAX_AGE = 10
PROJECTS_CACHE_MAX_AGE = 60 * 60 * 24

_REPOSITORY_LIST = pydantic.TypeAdapter(list[github.Repository])


def _repositories_response(
    repositories: list[github.Repository], max_age: int
) -> fastapi.responses.Response:
    """Serialize repositories as a publicly cacheable JSON response."""
    return fastapi.responses.Response(
        content=_REPOSITORY_LIST.dump_json(repositories),
        media_type='application/json',
        headers={'Cache-Control': f'public, max-age={max_age}'},
    )


@router.get('/github/pinned-repository')
async def pinned_repository(
    settings: common.settings.Settings = fastapi.Depends(common.app.get_settings),
) -> fastapi.responses.Response:
    """Return the owner's pinned repositories, or an empty 500 on any failure."""
    try:
        async with httpx.AsyncClient() as client:
            repositories = await github.fetch_pinned_repositories(client, settings)
    except (httpx.HTTPError, errors.GitHubError):
        logger.exception('Failed to fetch pinned repositories')
        return fastapi.responses.Response(status_code=500)
    return _repositories_response(repositories, PINNED_CACHE_MAX_AGE)


@router.get('/projects')
async def projects(
    settings: common.settings.Settings = fastapi.Depends(common.app.get_settings),
) -> fastapi.responses.Response:
    """Return the owner's projects, or an empty 500 on any failure."""
    try:
        async with httpx.AsyncClient() as client:
            repositories = await github.fetch_projects(client, settings)
    except (httpx.HTTPError, errors.GitHubError):
        logger.exception('Failed to fetch projects')
        return fastapi.responses.Response(status_code=500)
    return _repositories_response(repositories, PROJECTS_CACHE_MAX_AGE)
