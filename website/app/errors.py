"""Exception types raised by the site's content and proxy pipelines."""


class DocumentResolutionError(Exception):
    """A post document could not be read, parsed or validated.

    Fatal for the whole listing: the loader never returns a partial result.
    """


class PathDerivationError(DocumentResolutionError):
    """A document path has no segment to derive a post id from."""


class BodyReadError(Exception):
    """A rendered response body could not be read as text."""


class GitHubError(Exception):
    """The GitHub API could not be queried."""


class GitHubDecodeError(GitHubError):
    """The GitHub API returned a payload of an unexpected shape."""
