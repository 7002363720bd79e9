"""
Briefings Module - daily digest generation and storage.
"""

from regintel.briefings.generator import BriefingGenerator, render_markdown
from regintel.briefings.repository import BriefingRepository

__all__ = [
    "BriefingGenerator",
    "BriefingRepository",
    "render_markdown",
]
