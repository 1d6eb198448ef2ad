"""Unit tests for posts.py module."""

import asyncio
import datetime
import pathlib
import tempfile
import unittest

import pydantic

import common.settings
from website.app import errors, posts


def _front_matter(
    title: str | None = 'Test',
    date: str = '2025-01-01',
    hidden: bool | None = None,
) -> str:
    lines = ['---']
    if title is not None:
        lines.append(f"title: '{title}'")
    lines.append("description: 'A test post'")
    lines.append(f'date: {date}')
    if hidden is not None:
        lines.append(f'hidden: {str(hidden).lower()}')
    lines.append('---')
    lines.append('Content')
    return '\n'.join(lines)


class TestPostMetaData(unittest.TestCase):
    """Tests for PostMetaData class."""

    def test_metadata_validation(self) -> None:
        """Test that metadata validates correctly."""
        metadata = posts.PostMetaData(
            title='Test Post',
            description='A test post',
            tldr='Short',
            date='2025-01-01',  # type: ignore[arg-type]
            hidden=True,
        )
        self.assertEqual(metadata.title, 'Test Post')
        self.assertEqual(metadata.description, 'A test post')
        self.assertEqual(metadata.tldr, 'Short')
        self.assertEqual(metadata.date, datetime.date(2025, 1, 1))
        self.assertTrue(metadata.hidden)

    def test_optional_fields_default(self) -> None:
        """tldr defaults to None and hidden to False."""
        metadata = posts.PostMetaData.model_validate(
            {'title': 'Test', 'description': 'Test', 'date': '2025-01-15'}
        )
        self.assertIsNone(metadata.tldr)
        self.assertFalse(metadata.hidden)

    def test_dash_and_slash_dates_are_equal(self) -> None:
        """2023-05-01 and 2023/05/01 parse to the same calendar date."""
        base = {'title': 'Test', 'description': 'Test'}
        dashed = posts.PostMetaData.model_validate({**base, 'date': '2023-05-01'})
        slashed = posts.PostMetaData.model_validate({**base, 'date': '2023/05/01'})
        self.assertEqual(dashed.date, datetime.date(2023, 5, 1))
        self.assertEqual(dashed.date, slashed.date)

    def test_yaml_date_accepted(self) -> None:
        """Dates already parsed by YAML are accepted as-is."""
        metadata = posts.PostMetaData.model_validate(
            {'title': 'Test', 'description': 'Test', 'date': datetime.date(2023, 5, 1)}
        )
        self.assertEqual(metadata.date, datetime.date(2023, 5, 1))

    def test_invalid_calendar_date_rejected(self) -> None:
        """A date string that is not a valid calendar date fails validation."""
        with self.assertRaises(pydantic.ValidationError):
            posts.PostMetaData.model_validate(
                {'title': 'Test', 'description': 'Test', 'date': '2023-02-30'}
            )

    def test_missing_title_rejected(self) -> None:
        """title is required."""
        with self.assertRaises(pydantic.ValidationError):
            posts.PostMetaData.model_validate(
                {'description': 'Test', 'date': '2023-02-01'}
            )


class TestDerivePostId(unittest.TestCase):
    """Tests for derive_post_id."""

    def test_nested_path(self) -> None:
        """The id is the final segment without its extension."""
        self.assertEqual(posts.derive_post_id('foo/bar/my-post.md'), 'my-post')

    def test_pathlib_path(self) -> None:
        """pathlib paths are accepted."""
        self.assertEqual(
            posts.derive_post_id(pathlib.PurePosixPath('/srv/posts/hello.md')), 'hello'
        )

    def test_multiple_dots(self) -> None:
        """Everything after the first dot is dropped."""
        self.assertEqual(posts.derive_post_id('posts/hello.draft.md'), 'hello')

    def test_empty_path_raises(self) -> None:
        """A path with no segments has no id."""
        for path in ('', '/'):
            with self.assertRaises(errors.PathDerivationError):
                posts.derive_post_id(path)

    def test_missing_extension_raises(self) -> None:
        """A file name without an extension has no id."""
        with self.assertRaises(errors.PathDerivationError):
            posts.derive_post_id('posts/README')


class TestResolvePost(unittest.TestCase):
    """Tests for resolve_post."""

    def setUp(self) -> None:
        """Create a temporary posts directory."""
        self._tmpdir = tempfile.TemporaryDirectory()
        self.tmppath = pathlib.Path(self._tmpdir.name)

    def tearDown(self) -> None:
        """Remove the temporary posts directory."""
        self._tmpdir.cleanup()

    def test_resolves_post(self) -> None:
        """id, href, metadata and body are populated."""
        path = self.tmppath / 'my-post.md'
        path.write_text(_front_matter(title='My Post', date='2023-05-01'))
        post = posts.resolve_post(path)
        self.assertEqual(post.id, 'my-post')
        self.assertEqual(post.href, 'blog/my-post')
        self.assertEqual(post.metadata.title, 'My Post')
        self.assertEqual(post.metadata.date, datetime.date(2023, 5, 1))
        self.assertEqual(post.body, 'Content')

    def test_missing_title_raises(self) -> None:
        """Missing required metadata is a resolution error."""
        path = self.tmppath / 'untitled.md'
        path.write_text(_front_matter(title=None))
        with self.assertRaises(errors.DocumentResolutionError):
            posts.resolve_post(path)

    def test_no_front_matter_raises(self) -> None:
        """A document without front matter is a resolution error."""
        path = self.tmppath / 'bare.md'
        path.write_text('# Just a heading\n')
        with self.assertRaises(errors.DocumentResolutionError):
            posts.resolve_post(path)

    def test_impossible_yaml_date_raises(self) -> None:
        """An unquoted date that is not a real calendar day is a resolution error."""
        path = self.tmppath / 'bad-date.md'
        path.write_text('---\ntitle: T\ndescription: D\ndate: 2023-02-30\n---\nBody')
        with self.assertRaises(errors.DocumentResolutionError):
            posts.resolve_post(path)

    def test_missing_file_raises(self) -> None:
        """An unreadable document is a resolution error."""
        with self.assertRaises(errors.DocumentResolutionError):
            posts.resolve_post(self.tmppath / 'missing.md')


class TestRenderMarkdown(unittest.TestCase):
    """Tests for markdown rendering."""

    def test_top_level_table_wrapped(self) -> None:
        """Tables in the post body are wrapped for styling."""
        html = posts.render_markdown('| A | B |\n|---|---|\n| 1 | 2 |\n')
        self.assertIn('<div class="table-wrapper"><table>', html)

    def test_code_uses_source_palette(self) -> None:
        """Highlighted code carries inline source palette colors."""
        html = posts.render_markdown('```python\ndef hello():\n    return 1\n```\n')
        self.assertIn('style="color: #569CD6"', html)

    def test_headings_rendered(self) -> None:
        """Markdown headings are converted to HTML."""
        html = posts.render_markdown('# Title\n\n## Section\n')
        self.assertIn('<h1', html)
        self.assertIn('<h2', html)


class TestLoadPosts(unittest.TestCase):
    """Tests for load_posts, load_all_posts and get_post."""

    def setUp(self) -> None:
        """Create a temporary posts directory with a mix of posts."""
        self._tmpdir = tempfile.TemporaryDirectory()
        self.tmppath = pathlib.Path(self._tmpdir.name)
        self._write('a-old.md', _front_matter(title='Old', date='2023-01-01'))
        self._write('b-new.md', _front_matter(title='New', date='2023-06-01'))
        self._write('c-same-day.md', _front_matter(title='Same A', date='2023-03-01'))
        self._write('d-same-day.md', _front_matter(title='Same B', date='2023/03/01'))
        self._write(
            'e-hidden.md', _front_matter(title='Hidden', date='2023-12-01', hidden=True)
        )

    def tearDown(self) -> None:
        """Remove the temporary posts directory."""
        self._tmpdir.cleanup()

    def _write(self, name: str, text: str) -> None:
        (self.tmppath / name).write_text(text)

    def test_excludes_hidden_posts(self) -> None:
        """Output length equals the number of non-hidden documents."""
        loaded = asyncio.run(posts.load_posts(self.tmppath))
        self.assertEqual(len(loaded), 4)
        self.assertFalse(any(p.metadata.hidden for p in loaded))

    def test_sorted_newest_first_with_stable_ties(self) -> None:
        """Posts are ordered by date descending; same-day posts keep file order."""
        loaded = asyncio.run(posts.load_posts(self.tmppath))
        self.assertEqual(
            [p.id for p in loaded], ['b-new', 'c-same-day', 'd-same-day', 'a-old']
        )
        for i in range(len(loaded) - 1):
            self.assertGreaterEqual(loaded[i].metadata.date, loaded[i + 1].metadata.date)

    def test_load_all_posts_includes_hidden(self) -> None:
        """load_all_posts keeps hidden posts in date order."""
        loaded = asyncio.run(posts.load_all_posts(self.tmppath))
        self.assertEqual(len(loaded), 5)
        self.assertEqual(loaded[0].id, 'e-hidden')

    def test_missing_title_fails_whole_load(self) -> None:
        """One invalid document fails the entire listing."""
        self._write('f-broken.md', _front_matter(title=None))
        with self.assertRaises(errors.DocumentResolutionError):
            asyncio.run(posts.load_posts(self.tmppath))

    def test_duplicate_ids_raise_error(self) -> None:
        """Two files that derive the same id are rejected."""
        self._write('b-new.draft.md', _front_matter(title='Copy'))
        with self.assertRaisesRegex(errors.DocumentResolutionError, 'Duplicate post ids'):
            asyncio.run(posts.load_all_posts(self.tmppath))

    def test_empty_directory(self) -> None:
        """An empty posts directory yields no posts."""
        with tempfile.TemporaryDirectory() as tmpdir:
            self.assertEqual(asyncio.run(posts.load_posts(pathlib.Path(tmpdir))), [])

    def test_get_post_finds_hidden(self) -> None:
        """Hidden posts are reachable by id."""
        post = asyncio.run(posts.get_post(self.tmppath, 'e-hidden'))
        assert post is not None
        self.assertEqual(post.metadata.title, 'Hidden')

    def test_get_post_unknown_id(self) -> None:
        """Unknown ids return None."""
        self.assertIsNone(asyncio.run(posts.get_post(self.tmppath, 'nope')))


class TestRealPosts(unittest.TestCase):
    """Tests against the site's own posts directory."""

    def test_load_posts_from_real_directory(self) -> None:
        """Every bundled post loads with valid metadata."""
        loaded = asyncio.run(posts.load_posts(common.settings.DEFAULT_POSTS_DIR))
        self.assertGreater(len(loaded), 0)
        for post in loaded:
            self.assertTrue(post.metadata.title)
            self.assertTrue(post.metadata.description)
            self.assertFalse(post.metadata.hidden)


if __name__ == '__main__':
    unittest.main()
