from pkgfeeds.core.feeds.store import (
    FeedConfig,
    FeedEntry,
    get_field,
    has_package,
    list_package_names,
    load_feed_config,
    schema_version,
)

__all__ = [
    "FeedConfig",
    "FeedEntry",
    "get_field",
    "has_package",
    "list_package_names",
    "load_feed_config",
    "schema_version",
]
