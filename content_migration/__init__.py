"""
Content Migration

A toolkit for moving structured content entries exported from a source
content platform into a target headless CMS.

Supports:
- Resolving source content types to target item types
- Per-locale field value transformation with default-locale fallback
- Bounded-concurrency record creation
- Publishing records that were published at the source
- Dry runs without touching the target
"""

__version__ = "0.1.0"
