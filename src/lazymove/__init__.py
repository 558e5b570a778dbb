"""Lazy copy/move of a single file.

The destination is only rewritten when a bounded prefix comparison says its
content differs from the source.
"""

__version__ = '0.1.0'
