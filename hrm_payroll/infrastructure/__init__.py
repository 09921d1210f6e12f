"""Infrastructure layer exports."""

from .feeds import (
    FeedClient,
    HttpFeedClient,
    InMemoryFeedClient,
    configure_feed_client,
    get_feed_client,
    unwrap_list,
)

__all__ = [
    "FeedClient",
    "HttpFeedClient",
    "InMemoryFeedClient",
    "configure_feed_client",
    "get_feed_client",
    "unwrap_list",
]
