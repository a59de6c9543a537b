"""
Top-level package for the Profile API.

Manages a user profile document and the ordered sub-collections it
embeds (events, milestones, pinned testimonials).  All functionality
lives in submodules under ``app``.
"""

__all__ = []
