"""
Feed Cache Store
===============

One file per feed identifier holding the last fetched document, byte for
byte. No expiry and no size bound: a slot is simply overwritten by the next
successful fetch.
"""

import hashlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, Union

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import CacheReadFault, CacheWriteFault


class CacheStore(Protocol):
    """Capability: read/write raw bytes to a named slot."""

    def write(self, slot: Optional[Path], source: BinaryIO) -> None:
        ...

    def read(self, slot: Optional[Path]) -> Optional[bytes]:
        ...


class CacheSlotResolver(Protocol):
    """Capability: map a feed identifier to its cache slot."""

    def resolve(self, identifier: str) -> Optional[Path]:
        ...


class FileCacheStore:
    """Cache store keeping each slot as a file on local disk."""

    def __init__(self):
        self.logger = get_logger_for_component("cache_store")

    def write(self, slot: Optional[Path], source: BinaryIO) -> None:
        """Overwrite a slot with the contents of a stream.

        The data goes to a temporary sibling file first and is moved over the
        slot with ``os.replace``, so readers see either the old or the new
        document, never a partial one.

        Args:
            slot: Cache file path; None makes this a no-op
            source: Stream to copy from its current position

        Raises:
            CacheWriteFault: If the file cannot be written
        """
        if slot is None:
            return

        slot = Path(slot)
        tmp_name = None
        try:
            slot.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb", dir=slot.parent, prefix=f".{slot.name}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                shutil.copyfileobj(source, tmp)
            os.replace(tmp_name, slot)
            tmp_name = None
        except OSError as e:
            raise CacheWriteFault(f"Failed to write cache file {slot}: {e}", slot=slot) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    self.logger.warning(f"Could not remove temporary cache file {tmp_name}")

        self.logger.debug(f"Cached feed document at {slot}")

    def read(self, slot: Optional[Path]) -> Optional[bytes]:
        """Read a slot.

        Args:
            slot: Cache file path

        Returns:
            Slot contents, or None if the slot is None or was never written

        Raises:
            CacheReadFault: On I/O failure other than "not found"
        """
        if slot is None:
            return None

        try:
            return Path(slot).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheReadFault(f"Failed to read cache file {slot}: {e}", slot=slot) from e


class DirectoryCacheResolver:
    """Resolve identifiers to ``<directory>/<sha256(identifier)><suffix>``."""

    def __init__(self, directory: Union[str, Path], suffix: str = ".xml"):
        self.directory = Path(directory)
        self.suffix = suffix

    def resolve(self, identifier: str) -> Optional[Path]:
        digest = hashlib.sha256(identifier.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{self.suffix}"
