"""RSS feed items built from published posts."""

import datetime
import email.utils
import urllib.parse

import pydantic

from . import posts


class FeedItem(pydantic.BaseModel):
    """A single RSS item."""

    title: str
    description: str
    pub_date: datetime.date
    link: str

    @property
    def pub_date_rfc822(self) -> str:
        """Publication date formatted for the RSS pubDate element."""
        dt = datetime.datetime.combine(
            self.pub_date, datetime.time(), tzinfo=datetime.timezone.utc
        )
        return email.utils.format_datetime(dt)


def build_feed_items(items: list[posts.Post], site_url: str) -> list[FeedItem]:
    """Map posts to feed items, keeping their order, with absolute links."""
    return [
        FeedItem(
            title=post.metadata.title,
            description=post.metadata.description,
            pub_date=post.metadata.date,
            link=urllib.parse.urljoin(site_url, post.href),
        )
        for post in items
    ]
