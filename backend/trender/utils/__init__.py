"""
Utility functions
"""
from .buckets import BucketWindow, align_to_bucket, bucket_size_label, current_bucket_window
from .slug import generate_slug
from .timezone import get_deployment_tz, now_local, to_local

__all__ = [
    "BucketWindow",
    "align_to_bucket",
    "bucket_size_label",
    "current_bucket_window",
    "generate_slug",
    "get_deployment_tz",
    "now_local",
    "to_local",
]
