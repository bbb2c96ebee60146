"""
FeedLoader Data Models
=====================

Pydantic models for parsed feeds. The loader itself only looks at
``Feed.link``; everything else is filled in by the parser for callers.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """A single entry of a feed."""
    title: str = Field(default="", description="Item title")
    link: Optional[str] = Field(default=None, description="Item permalink")
    description: str = Field(default="", description="Item summary or description")
    guid: Optional[str] = Field(default=None, description="Globally unique identifier")
    author: Optional[str] = Field(default=None, description="Item author")
    published: Optional[datetime] = Field(default=None, description="Publication date (UTC)")
    categories: List[str] = Field(default_factory=list, description="Item categories")

    def __str__(self) -> str:
        return f"FeedItem({self.title[:50]})"


class Feed(BaseModel):
    """Parsed syndication feed."""
    title: str = Field(default="", description="Channel title")
    link: Optional[str] = Field(default=None, description="Canonical link of the feed")
    description: str = Field(default="", description="Channel description")
    language: Optional[str] = Field(default=None, description="Channel language")
    items: List[FeedItem] = Field(default_factory=list, description="Feed entries in document order")

    def __str__(self) -> str:
        return f"Feed({self.title[:50]}:{len(self.items)} items)"
