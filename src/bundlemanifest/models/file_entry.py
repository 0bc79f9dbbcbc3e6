from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from .common import FileType


class FileEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    offset: int = Field(..., ge=0)
    size: int = Field(..., ge=0)
    compressed_size: int = Field(..., ge=0)
    type: FileType = FileType.UNKNOWN
    relative_path: str = Field(..., min_length=1)

    @property
    def is_compressed(self) -> bool:
        return self.compressed_size not in (0, self.size)

    @property
    def stored_size(self) -> int:
        """Bytes the entry occupies in the container."""
        return self.compressed_size if self.compressed_size else self.size
