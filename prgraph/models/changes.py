from dataclasses import dataclass, field
from typing import Optional, Any
from enum import Enum

from prgraph.utils import normalize_repo_path


class ChangeType(Enum):
    """Kinds of change a pull request can make to a file."""
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"
    RENAME = "rename"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "ChangeType":
        """Map a code-review service value ("Edit", "edit, rename", ...) to a ChangeType."""
        if isinstance(value, ChangeType):
            return value
        text = str(value or "").strip().lower()
        # Services may report combined types such as "edit, rename"
        primary = text.split(",")[0].strip()
        for member in cls:
            if member.value == primary:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class ChangedFile:
    """A file touched by the pull request."""
    path: str
    change_type: ChangeType = ChangeType.EDIT
    url: Optional[str] = None

    @classmethod
    def create(
        cls,
        path: str,
        change_type: Any = ChangeType.EDIT,
        url: Optional[str] = None,
    ) -> "ChangedFile":
        """Build a ChangedFile with a normalized repo-relative path."""
        return cls(
            path=normalize_repo_path(path),
            change_type=ChangeType.parse(change_type),
            url=url,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChangedFile":
        return cls.create(
            data["path"],
            data.get("changeType", data.get("change_type", ChangeType.EDIT)),
            data.get("url"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "changeType": self.change_type.value,
            "url": self.url,
        }


@dataclass
class PullRequestInfo:
    """Pull-request metadata supplied by the code-review service."""
    id: Optional[str] = None
    title: str = ""
    url: Optional[str] = None
    source_ref: Optional[str] = None
    target_ref: Optional[str] = None
    changed_files: list[ChangedFile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PullRequestInfo":
        return cls(
            id=None if data.get("id") is None else str(data["id"]),
            title=data.get("title", ""),
            url=data.get("url"),
            source_ref=data.get("sourceRefName", data.get("source_ref")),
            target_ref=data.get("targetRefName", data.get("target_ref")),
            changed_files=[
                ChangedFile.from_dict(f) for f in data.get("changedFiles", data.get("changed_files", []))
            ],
        )
