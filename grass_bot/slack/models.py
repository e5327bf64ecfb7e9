"""Typed request and response bodies for the Slack Web API calls.

WHY: The external upload flow touches three Web API methods with fixed
JSON shapes. Pydantic models pin those shapes down, so a misspelled key
fails at construction time instead of silently reaching Slack, and a
malformed Slack response fails validation instead of raising KeyError
deep in the upload code.

HOW: One request model per method, serialized with model_dump(); one
response model per method, parsed with model_validate().

RULES:
- Unknown response fields are ignored (Slack adds fields freely)
- files.getUploadURLExternal is read in either shape Slack uses: a
  top-level upload_url/file_id pair, or a files list
- Python 3.9+ compatible (Optional/List from typing in pydantic models)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class UploadSession:
    """One upload slot handed out by Slack; valid for a single upload."""

    file_id: str
    upload_url: str


# ---------------------------------------------------------------------------
# files.getUploadURLExternal
# ---------------------------------------------------------------------------


class UploadFileSpec(BaseModel):
    filename: str
    length: int


class GetUploadURLRequest(BaseModel):
    """Body for files.getUploadURLExternal."""

    filename: str
    length: int
    files: List[UploadFileSpec]
    channels: List[str] = Field(default_factory=list)

    @classmethod
    def for_file(cls, filename: str, length: int, channel_id: str) -> GetUploadURLRequest:
        return cls(
            filename=filename,
            length=length,
            files=[UploadFileSpec(filename=filename, length=length)],
            channels=[channel_id] if channel_id else [],
        )


class UploadURLFile(BaseModel):
    id: str
    upload_url: str
    url_private: Optional[str] = None


class GetUploadURLResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    upload_url: Optional[str] = None
    file_id: Optional[str] = None
    files: List[UploadURLFile] = Field(default_factory=list)

    def sessions(self) -> List[UploadSession]:
        """Upload slots in the response, whichever shape Slack used."""
        if self.files:
            return [UploadSession(file_id=f.id, upload_url=f.upload_url) for f in self.files]
        if self.upload_url and self.file_id:
            return [UploadSession(file_id=self.file_id, upload_url=self.upload_url)]
        return []


# ---------------------------------------------------------------------------
# files.completeUploadExternal / chat.postMessage
# ---------------------------------------------------------------------------


class FileRef(BaseModel):
    id: str


class CompleteUploadRequest(BaseModel):
    """Body for files.completeUploadExternal."""

    files: List[FileRef]


class PostMessageRequest(BaseModel):
    """Body for chat.postMessage referencing uploaded files."""

    channel: str
    text: str
    file_ids: List[str] = Field(default_factory=list)


class SlackAPIResult(BaseModel):
    """Minimal envelope shared by every Web API response."""

    ok: bool
    error: Optional[str] = None
