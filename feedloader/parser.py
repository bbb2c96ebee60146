"""
Feed Parser
==========

Decodes RSS/Atom documents into Feed models using feedparser.

feedparser is lenient: it flags malformed documents as "bozo" instead of
failing. A document is accepted as long as a feed format was recognised or
entries were recovered; otherwise it is rejected with ParseFault.
"""

from datetime import datetime, timezone
from typing import Any, BinaryIO, List, Optional, Protocol

import feedparser

from .config.settings import ParserSettings, get_settings
from .models import Feed, FeedItem
from .utils.logging import get_logger_for_component
from .utils.exceptions import ParseFault, ErrorCode


class Parser(Protocol):
    """Capability: decode a byte stream into a Feed."""

    def parse(self, stream: BinaryIO) -> Feed:
        ...


class FeedParser:
    """Thread-safe feedparser-backed parser.

    Holds no per-call state, so one instance may be shared by concurrent
    loads.
    """

    def __init__(self, settings: Optional[ParserSettings] = None):
        """Initialize parser.

        Args:
            settings: Capacity settings (default from config)
        """
        self.settings = settings or get_settings().parser
        self.logger = get_logger_for_component("parser")

    def parse(self, stream: BinaryIO) -> Feed:
        """Parse a feed document.

        Args:
            stream: Binary stream positioned at the start of the document

        Returns:
            Parsed Feed; ``link`` is None when the document has none

        Raises:
            ParseFault: If no feed could be recognised in the document
        """
        try:
            # Always hand feedparser a stream; bare bytes may be taken for a path
            parsed = feedparser.parse(stream)
        except Exception as e:
            raise ParseFault(f"Feed parser crashed: {e}") from e

        if not parsed.get("version") and not parsed.get("entries"):
            if parsed.get("bozo"):
                raise ParseFault(
                    f"Not a feed document: {parsed.get('bozo_exception')}",
                    error_code=ErrorCode.FEED_PARSE_ERROR,
                )
            raise ParseFault(
                "Document contains no feed", error_code=ErrorCode.FEED_EMPTY_DOCUMENT
            )

        if parsed.get("bozo"):
            self.logger.warning(
                f"Feed parsed with warnings: {parsed.get('bozo_exception')}"
            )

        channel = parsed.get("feed", {})
        entries = parsed.get("entries", [])
        if self.settings.max_items is not None:
            entries = entries[: self.settings.max_items]

        return Feed(
            title=(channel.get("title") or "").strip(),
            link=channel.get("link") or None,
            description=self._truncate(
                channel.get("subtitle") or channel.get("description") or ""
            ),
            language=channel.get("language") or None,
            items=[self._parse_entry(entry) for entry in entries],
        )

    def _parse_entry(self, entry: Any) -> FeedItem:
        author = entry.get("author")
        return FeedItem(
            title=(entry.get("title") or "").strip(),
            link=entry.get("link") or None,
            description=self._truncate(
                entry.get("summary") or entry.get("description") or ""
            ),
            guid=entry.get("id") or None,
            author=author.strip() if author else None,
            published=self._parse_date(entry),
            categories=self._parse_categories(entry),
        )

    def _truncate(self, text: str) -> str:
        text = text.strip()
        limit = self.settings.max_description_length
        if len(text) > limit:
            return text[:limit] + "..."
        return text

    @staticmethod
    def _parse_date(entry: Any) -> Optional[datetime]:
        for field in ("published_parsed", "updated_parsed", "created_parsed"):
            date_tuple = entry.get(field)
            if date_tuple:
                try:
                    return datetime(*date_tuple[:6], tzinfo=timezone.utc)
                except (ValueError, TypeError):
                    continue
        return None

    @staticmethod
    def _parse_categories(entry: Any) -> List[str]:
        categories = []
        for tag in entry.get("tags") or []:
            term = tag.get("term", "") if isinstance(tag, dict) else str(tag)
            if term and term.strip():
                categories.append(term.strip())
        return categories
