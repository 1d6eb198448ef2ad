"""GitHub API client for the pinned repositories and projects endpoints.

Transport and decoding are separate steps: the fetch functions only talk HTTP,
the parse functions turn a JSON payload into Repository models and raise
GitHubDecodeError when the payload does not have the expected shape.
"""

import json
from typing import Any

import httpx
import pydantic

import common.settings

from . import errors

GITHUB_API_URL = 'https://api.github.com'
GITHUB_GRAPHQL_URL = f'{GITHUB_API_URL}/graphql'

PINNED_REPOSITORIES_QUERY = """
query ($login: String!) {
  user(login: $login) {
    pinnedItems(first: 10, types: REPOSITORY) {
      nodes {
        ... on Repository {
          name
          description
          stargazerCount
          languages(first: 1) {
            nodes {
              ... on Language {
                name
              }
            }
          }
          url
        }
      }
    }
  }
}
"""


class Repository(pydantic.BaseModel):
    """A repository as served to the site's frontend."""

    name: str
    description: str | None
    stars: int
    language: str
    url: str


# ---------------------------------------------------------------------------
# Upstream payload shapes
# ---------------------------------------------------------------------------


class _Language(pydantic.BaseModel):
    name: str


class _LanguageConnection(pydantic.BaseModel):
    nodes: list[_Language]


class _PinnedRepository(pydantic.BaseModel):
    name: str
    description: str | None = None
    stargazer_count: int = pydantic.Field(alias='stargazerCount')
    languages: _LanguageConnection
    url: str


class _PinnedItems(pydantic.BaseModel):
    nodes: list[_PinnedRepository]


class _User(pydantic.BaseModel):
    pinned_items: _PinnedItems = pydantic.Field(alias='pinnedItems')


class _PinnedData(pydantic.BaseModel):
    user: _User


class _PinnedResponse(pydantic.BaseModel):
    data: _PinnedData


class _RestRepository(pydantic.BaseModel):
    name: str
    description: str | None = None
    stargazers_count: int
    language: str | None = None
    html_url: str
    fork: bool = False


_REST_REPOSITORIES = pydantic.TypeAdapter(list[_RestRepository])


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def parse_pinned_repositories(payload: Any) -> list[Repository]:
    """Decode a GraphQL pinned items response."""
    try:
        result = _PinnedResponse.model_validate(payload)
    except pydantic.ValidationError as e:
        raise errors.GitHubDecodeError(f'Unexpected pinned items payload: {e}') from e
    return [
        Repository(
            name=node.name,
            description=node.description,
            stars=node.stargazer_count,
            language=node.languages.nodes[0].name if node.languages.nodes else '',
            url=node.url,
        )
        for node in result.data.user.pinned_items.nodes
    ]


def parse_projects(payload: Any) -> list[Repository]:
    """Decode a REST repository listing into non-fork repositories, most starred first."""
    try:
        repos = _REST_REPOSITORIES.validate_python(payload)
    except pydantic.ValidationError as e:
        raise errors.GitHubDecodeError(f'Unexpected repositories payload: {e}') from e
    projects = [
        Repository(
            name=repo.name,
            description=repo.description,
            stars=repo.stargazers_count,
            language=repo.language or '',
            url=repo.html_url,
        )
        for repo in repos
        if not repo.fork
    ]
    return sorted(projects, key=lambda r: r.stars, reverse=True)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def _make_headers(api_key: str | None) -> dict[str, str]:
    """Build GitHub request headers."""
    headers = {'Accept': 'application/vnd.github+json'}
    if api_key:
        headers['Authorization'] = f'Bearer {api_key}'
    return headers


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except json.JSONDecodeError as e:
        raise errors.GitHubDecodeError(f'GitHub returned invalid JSON: {e}') from e


async def fetch_pinned_repositories(
    client: httpx.AsyncClient, settings: common.settings.Settings
) -> list[Repository]:
    """Fetch the configured user's pinned repositories via GraphQL."""
    if not settings.github_api_key:
        raise errors.GitHubError('GITHUB_API_KEY is not configured.')
    response = await client.post(
        GITHUB_GRAPHQL_URL,
        json={
            'query': PINNED_REPOSITORIES_QUERY,
            'variables': {'login': settings.github_username},
        },
        headers=_make_headers(settings.github_api_key),
        timeout=settings.github_timeout,
    )
    response.raise_for_status()
    return parse_pinned_repositories(_json(response))


async def fetch_projects(
    client: httpx.AsyncClient, settings: common.settings.Settings
) -> list[Repository]:
    """Fetch the configured user's own public repositories via REST."""
    response = await client.get(
        f'{GITHUB_API_URL}/users/{settings.github_username}/repos',
        params={'type': 'owner', 'per_page': '100'},
        headers=_make_headers(settings.github_api_key),
        timeout=settings.github_timeout,
    )
    response.raise_for_status()
    return parse_projects(_json(response))
