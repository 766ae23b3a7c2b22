"""Shared configuration components.

This internal package holds the configuration dataclasses used by the
traversal and reconciliation entry points. It should NOT be imported
directly by users; the names are re-exported from ``docmirror``.
"""

from .config import DEFAULT_COLUMNS, MirrorConfig, TraversalConfig

__all__ = [
    'DEFAULT_COLUMNS',
    'MirrorConfig',
    'TraversalConfig',
]
