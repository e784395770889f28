"""Comment and description templates."""

from __future__ import annotations

from .render import CommentRenderer, title_similarity

__all__ = ["CommentRenderer", "title_similarity"]
