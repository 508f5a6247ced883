from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

ROOT_NAME = "Home"


@dataclass
class Session:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class PathEntry:
    name: str
    id: Optional[str] = None


ROOT_ENTRY = PathEntry(ROOT_NAME, None)


class ViewMode(Enum):
    FOLDER = "folder"
    RECENT = "recent"


@dataclass
class SearchState:
    raw: str = ""
    debounced: str = ""
    pending: bool = False


def _record_id(row: Dict[str, Any]) -> str:
    value = row.get("_id") or row.get("id")
    return str(value) if value is not None else ""


def _parent_id(row: Dict[str, Any]) -> Optional[str]:
    value = row.get("parentId") or row.get("folderId") or row.get("parent")
    return str(value) if value else None


def _size(value: Any) -> int:
    try:
        return max(int(float(value or 0)), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass
class FileItem:
    id: str
    name: str
    is_folder: bool = False
    size_bytes: int = 0
    parent_id: Optional[str] = None
    created_at: Optional[str] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_json(cls, row: Dict[str, Any]) -> "FileItem":
        kind = str(row.get("type") or "").lower()
        return cls(
            id=_record_id(row),
            name=row.get("name") or row.get("originalName") or row.get("filename") or "",
            is_folder=bool(row.get("isFolder")) or kind == "folder",
            size_bytes=_size(row.get("size")),
            parent_id=_parent_id(row),
            created_at=row.get("createdAt") or row.get("uploadedAt"),
            mime_type=row.get("mimeType") or row.get("mimetype"),
        )


@dataclass
class FolderRecord:
    id: str
    name: str
    parent_id: Optional[str] = None

    @classmethod
    def from_json(cls, row: Dict[str, Any]) -> "FolderRecord":
        return cls(id=_record_id(row), name=row.get("name") or "", parent_id=_parent_id(row))
