from legend.resources.catalog import (
    ResourceCatalog,
    build_catalog,
    catalog_from_metadata,
    reconcile_order,
)
from legend.resources.display import (
    DisplayBuckets,
    GroupEntry,
    ResourceEntry,
    build_display_buckets,
    is_stat_id,
)

__all__ = [
    "ResourceCatalog",
    "build_catalog",
    "catalog_from_metadata",
    "reconcile_order",
    "DisplayBuckets",
    "GroupEntry",
    "ResourceEntry",
    "build_display_buckets",
    "is_stat_id",
]
