"""Blog post loading and rendering logic."""

import asyncio
import datetime
import logging
import pathlib

import frontmatter  # type: ignore[reportMissingTypeStubs]
import markdown
import pydantic
import yaml

from . import errors, highlight, postprocess

logger = logging.getLogger(__name__)

HREF_PREFIX = 'blog'

MARKDOWN_EXTENSIONS = [
    'fenced_code',
    'codehilite',
    'tables',
    'toc',
    postprocess.TableWrapperExtension(),
]
MARKDOWN_EXTENSION_CONFIGS = {
    'codehilite': {
        'noclasses': True,
        'pygments_style': highlight.SourceThemeStyle,
        'guess_lang': False,
    },
}


def render_markdown(text: str) -> str:
    """Render markdown text to HTML, with highlighted code and wrapped tables."""
    return markdown.markdown(
        text,
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )


class PostMetaData(pydantic.BaseModel):
    """Front matter specification for blog posts."""

    title: str
    description: str
    tldr: str | None = None
    date: datetime.date
    hidden: bool = False

    @pydantic.field_validator('date', mode='before')
    @classmethod
    def _parse_date(cls, value: object) -> object:
        """Accepts YAML dates as well as YYYY-MM-DD or legacy YYYY/MM/DD strings."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str):
            normalized = value.strip().replace('/', '-')
            return datetime.datetime.strptime(normalized, '%Y-%m-%d').date()
        return value


class Post(pydantic.BaseModel):
    """A single normalized blog post."""

    model_config = pydantic.ConfigDict(frozen=True)

    id: str
    metadata: PostMetaData
    body: str
    href: str

    @property
    def content(self) -> str:
        """Returns markdown-rendered HTML of the post body."""
        return render_markdown(self.body)


def derive_post_id(path: str | pathlib.PurePath) -> str:
    """Derive a post id from the final segment of a document path.

    The id is the file name up to its first dot, so ``foo/bar/my-post.md``
    becomes ``my-post``.
    """
    segments = [s for s in pathlib.PurePath(path).as_posix().split('/') if s]
    if not segments:
        raise errors.PathDerivationError(
            f'Failed to extract file name from path: {path!r}'
        )
    post_id = segments[-1].split('.')[0]
    if not post_id or '.' not in segments[-1]:
        raise errors.PathDerivationError(
            f'Failed to extract post id from file name: {segments[-1]!r}'
        )
    return post_id


def resolve_post(path: pathlib.Path) -> Post:
    """Load one markdown document into a Post.

    Raises DocumentResolutionError if the file cannot be read, its front matter
    cannot be parsed, or required metadata is missing or invalid.
    """
    post_id = derive_post_id(path)
    try:
        document = frontmatter.load(path.as_posix())
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise errors.DocumentResolutionError(f'Failed to read post {path}: {e}') from e

    try:
        metadata = PostMetaData.model_validate(document.metadata)
    except pydantic.ValidationError as e:
        raise errors.DocumentResolutionError(
            f'Invalid front matter in post {path}: {e}'
        ) from e

    return Post(
        id=post_id,
        metadata=metadata,
        body=document.content,
        href=f'{HREF_PREFIX}/{post_id}',
    )


async def load_all_posts(posts_dir: pathlib.Path) -> list[Post]:
    """Load every post in posts_dir, hidden ones included, sorted newest first.

    Documents are resolved concurrently; the first failure aborts the whole
    load. Raises DocumentResolutionError if duplicate ids are detected.
    """
    paths = sorted(posts_dir.glob('*.md'))
    posts = list(
        await asyncio.gather(*(asyncio.to_thread(resolve_post, p) for p in paths))
    )

    seen: set[str] = set()
    duplicates: list[str] = []
    for post in posts:
        if post.id in seen:
            duplicates.append(post.id)
        seen.add(post.id)
    if duplicates:
        raise errors.DocumentResolutionError(f'Duplicate post ids: {duplicates}')

    logger.debug('Loaded %d posts from %s', len(posts), posts_dir)
    # sorted() is stable with reverse=True, so same-day posts keep discovery order.
    return sorted(posts, key=lambda p: p.metadata.date, reverse=True)


async def load_posts(posts_dir: pathlib.Path) -> list[Post]:
    """Load published posts, sorted newest first."""
    posts = await load_all_posts(posts_dir)
    return [p for p in posts if not p.metadata.hidden]


async def get_post(posts_dir: pathlib.Path, post_id: str) -> Post | None:
    """Find a post by id. Hidden posts are still reachable by direct link."""
    posts = await load_all_posts(posts_dir)
    return next((p for p in posts if p.id == post_id), None)
