from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from .common import FormatVersion, HeaderFlags


class FileLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    offset: int = Field(0, ge=0)
    size: int = Field(0, ge=0)

    @property
    def present(self) -> bool:
        return self.offset != 0 or self.size != 0


class FixedHeader(BaseModel):
    model_config = ConfigDict(frozen=True)

    major_version: int = Field(..., ge=0)
    minor_version: int = Field(..., ge=0)
    num_embedded_files: int = Field(..., ge=0)

    @property
    def version(self) -> FormatVersion:
        return FormatVersion(self.major_version, self.minor_version)

    def is_valid(self, reader: FormatVersion) -> bool:
        return self.num_embedded_files > 0 and self.version.readable_by(reader)


class Header(BaseModel):
    model_config = ConfigDict(frozen=True)

    major_version: int = Field(..., ge=0)
    minor_version: int = Field(..., ge=0)
    num_embedded_files: int = Field(..., gt=0)
    bundle_id: str = Field(..., min_length=1)
    # Only carried by format 2+
    deps_json: FileLocation = Field(default_factory=FileLocation)
    runtime_config_json: FileLocation = Field(default_factory=FileLocation)
    flags: int = Field(0, ge=0)

    @property
    def version(self) -> FormatVersion:
        return FormatVersion(self.major_version, self.minor_version)

    @property
    def has_tail(self) -> bool:
        return self.major_version >= 2

    @property
    def netcoreapp3_compat_mode(self) -> bool:
        return bool(self.flags & HeaderFlags.NETCOREAPP3_COMPAT_MODE)
