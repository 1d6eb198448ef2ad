"""Application settings, constructed once at process start."""

import os
import pathlib
from collections.abc import Mapping

import dotenv
import pydantic

REPO_DIR = pathlib.Path(__file__).resolve().parent.parent
DEFAULT_POSTS_DIR = REPO_DIR / 'website' / 'posts'
DEFAULT_BUILD_ID_PATH = REPO_DIR / '.BUILD_ID'
DOTENV_PATH = REPO_DIR / '.env'


class Settings(pydantic.BaseModel):
    """Configuration shared by every collaborator that needs it."""

    model_config = pydantic.ConfigDict(frozen=True)

    environment: str = 'production'
    domain: str = '.pilcrowonpaper.com'
    site_url: str = 'https://pilcrowonpaper.com/'
    site_title: str = 'Pilcrow'
    site_description: str = (
        "I think I'm best \"known\" for my work on auth libraries, but I'm "
        'interested in anything web dev... well maybe except CSS.'
    )
    posts_dir: pathlib.Path = DEFAULT_POSTS_DIR
    build_id_path: pathlib.Path = DEFAULT_BUILD_ID_PATH
    github_username: str = 'pilcrowonpaper'
    github_api_key: str | None = None
    github_timeout: float = 10.0
    log_level: str = 'INFO'

    @pydantic.field_validator('site_url')
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        """Relative links resolve under the site URL only with a trailing slash."""
        return value.rstrip('/') + '/'

    @property
    def dev(self) -> bool:
        """True when running in the development environment."""
        return self.environment == 'development'

    @property
    def home_url(self) -> str:
        """Home page URL: the domain without its leading separator."""
        return 'https://' + self.domain[1:]


_ENV_FIELDS = {
    'ENVIRONMENT': 'environment',
    'DOMAIN': 'domain',
    'SITE_URL': 'site_url',
    'POSTS_DIR': 'posts_dir',
    'BUILD_ID_PATH': 'build_id_path',
    'GITHUB_USERNAME': 'github_username',
    'GITHUB_API_KEY': 'github_api_key',
    'GITHUB_TIMEOUT': 'github_timeout',
    'LOG_LEVEL': 'log_level',
}


def load_settings(
    environ: Mapping[str, str] | None = None,
    dotenv_path: pathlib.Path = DOTENV_PATH,
) -> Settings:
    """Build settings from the environment.

    In development, values from the ``.env`` file fill in anything the process
    environment does not set.
    """
    values: dict[str, str | None] = dict(os.environ if environ is None else environ)
    if values.get('ENVIRONMENT') == 'development' and dotenv_path.is_file():
        for key, value in dotenv.dotenv_values(dotenv_path).items():
            values.setdefault(key, value)

    fields = {
        field: values[key]
        for key, field in _ENV_FIELDS.items()
        if values.get(key) not in (None, '')
    }
    return Settings.model_validate(fields)
