"""Multi-backtick template literal rewriter."""

from __future__ import annotations

from typing import Any

__version__ = "0.1.0"


def rewrite(tree: Any, source: str | None = None) -> Any:
    """Resolve and dedent every multi-backtick literal in *tree*."""
    from multitick.transform import transform_tree

    return transform_tree(tree, source)
