"""
Domain types for objects held in the storage bucket.
"""
import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


class Folder(str, enum.Enum):
    """Logical partitions of the bucket, stored as path prefixes."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def from_path(cls, path: Optional[str]) -> Optional["Folder"]:
        """
        Map a backend path to a folder.

        The backend reports directories as either "pending" or "pending/".
        Nested paths ("pending/2024") and unknown names map to None.
        """
        if not path:
            return None
        normalized = path.strip().strip("/")
        try:
            return cls(normalized)
        except ValueError:
            return None


def split_name(name: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Split an object name into (identifier, extension) on the last dot.

    Returns None when the name has no extension or no identifier,
    e.g. "README" or ".gitkeep".
    """
    if not name or "." not in name:
        return None
    identifier, extension = name.rsplit(".", 1)
    if not identifier or not extension:
        return None
    return identifier, extension


@dataclass
class StorageObject:
    """An object as reported by the backend listing."""
    name: str
    uuid: str
    folder: Optional[Folder]
    content_link: Optional[str] = None
    size: Optional[int] = None

    @property
    def identifier(self) -> Optional[str]:
        parts = split_name(self.name)
        return parts[0] if parts else None

    @property
    def extension(self) -> Optional[str]:
        parts = split_name(self.name)
        return parts[1] if parts else None

    @property
    def path(self) -> str:
        """Folder-qualified name, e.g. "pending/ADDR1.jpg"."""
        prefix = self.folder.value if self.folder else ""
        return f"{prefix}/{self.name}" if prefix else self.name


@dataclass
class UploadTarget:
    """
    A freshly opened upload session.

    upload_url is a one-time pre-signed destination the caller PUTs bytes to
    directly; the session is finalized with session_uuid.
    """
    session_uuid: str
    upload_url: str
    file_uuid: Optional[str]
    file_name: str
    content_type: str
    folder: Folder


@dataclass
class MoveRecord:
    identifier: str
    from_path: str
    to_path: str


@dataclass
class SkipRecord:
    identifier: str
    reason: str


@dataclass
class ErrorRecord:
    identifier: str
    error: str


@dataclass
class SyncResult:
    """Per-identifier outcome of a batch sync. Each identifier lands in exactly one list."""
    moved: List[MoveRecord] = field(default_factory=list)
    skipped: List[SkipRecord] = field(default_factory=list)
    errors: List[ErrorRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.moved) + len(self.skipped) + len(self.errors)
