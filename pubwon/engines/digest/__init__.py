"""Digest engine — markdown blog drafts from significant repository activity."""

from pubwon.engines.digest.template import DigestPost, render_digest, slugify

__all__ = ["DigestPost", "render_digest", "slugify"]
