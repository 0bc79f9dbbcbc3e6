from __future__ import annotations
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from .header import Header
from .file_entry import FileEntry


class Manifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    header: Header
    files: List[FileEntry] = Field(default_factory=list)
    header_offset: int = Field(0, ge=0)

    def index_of(self, relative_path: str) -> Optional[int]:
        wanted = relative_path.replace("\\", "/")
        for i, entry in enumerate(self.files):
            if entry.relative_path == wanted:
                return i
        return None

    def find(self, relative_path: str) -> Optional[FileEntry]:
        i = self.index_of(relative_path)
        return None if i is None else self.files[i]

    @classmethod
    def from_binary(cls, data: bytes | str | Path, *, header_offset: int | None = None) -> "Manifest":
        from ..binary.reader import parse_bundle
        return parse_bundle(data, header_offset=header_offset)

    def to_binary(self) -> bytes:
        from ..binary.writer import encode_manifest
        return encode_manifest(self.header, self.files)
