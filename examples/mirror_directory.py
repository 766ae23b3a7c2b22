#!/usr/bin/env python3
"""
Mirror a directory into a flat cache, the way an app keeps a local copy of
a granted document tree.

This example demonstrates:
- Streaming a tree breadth-first
- Category filtering
- Reconciling a cache directory and reading the report

Usage:
    python examples/mirror_directory.py SOURCE CACHE [CATEGORY]
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from docmirror import (
    ListingUnavailableError,
    MirrorConfig,
    Reconciler,
    get_tree_stats,
)
from docmirror.adapters import LocalDocumentProvider


def main():
    """Mirror SOURCE into CACHE."""
    if len(sys.argv) < 3:
        print(__doc__)
        return 2

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    source, cache = Path(sys.argv[1]), Path(sys.argv[2])
    category = sys.argv[3] if len(sys.argv) > 3 else "any"

    provider = LocalDocumentProvider(source)
    root = provider.root_node()

    print(f"Scanning: {root}")
    print("-" * 50)
    try:
        stats = get_tree_stats(root, provider)
    except ListingUnavailableError as e:
        print(f"Cannot scan {source}: {e}")
        return 1
    print(f"{stats['files']} files in {stats['directories']} directories")

    if category == "any":
        config = MirrorConfig.mirror(cache)
    else:
        config = MirrorConfig.filtered(cache, category)

    report = Reconciler(provider, provider, config).run(root)

    print(f"Copied:  {len(report.copied)}")
    print(f"Evicted: {len(report.deleted)}")
    if not report.ok:
        print(f"Failed:  {len(report.failed_copies) + len(report.failed_deletes)}")
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
