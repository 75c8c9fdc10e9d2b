"""
Entity normalizers turning raw upstream records into the internal contract.
"""
from __future__ import annotations

from publications.normalizers.comments import normalize_comment
from publications.normalizers.videos import apply_interactions, normalize_interactions, normalize_video

__all__ = ["apply_interactions", "normalize_comment", "normalize_interactions", "normalize_video"]
