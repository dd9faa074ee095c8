"""Public package surface for lazygallery.

Exports ``main`` for programmatic CLI invocation.
The browsing core lives in the ``tree_model``, ``media``, ``selection`` and
``runtime`` subpackages.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
