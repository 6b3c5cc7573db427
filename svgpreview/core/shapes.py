import codecs
from typing import Annotated, Iterator

from pydantic import AfterValidator, BaseModel, Field, field_validator

from svgpreview.core.load.config import (
    DEFAULT_EXTENSIONS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TITLE,
)


def _validate_non_whitespace_only(v: str) -> str:
    if not v.strip():
        raise ValueError("String cannot be only whitespace")
    return v


NonEmptyStr = Annotated[str, Field(min_length=1), AfterValidator(_validate_non_whitespace_only)]


class SymbolMap(BaseModel):
    """Ordered symbol-name to image-reference table read from one object literal."""

    model_config = {"frozen": True}

    entries: dict[str, str] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, name: str) -> str:
        return self.entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def keys(self) -> Iterator[str]:
        return iter(self.entries.keys())

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries.items())

    def to_dict(self) -> dict[str, str]:
        return dict(self.entries)


class Tile(BaseModel):
    model_config = {"frozen": True}

    name: str
    src: str


class PanelConfig(BaseModel):
    title: NonEmptyStr = DEFAULT_TITLE


class SourceConfig(BaseModel):
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    encoding: NonEmptyStr = "utf-8"

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("extensions must list at least one file suffix")
        for extension in v:
            if not extension.startswith(".") or len(extension) < 2:
                raise ValueError(
                    f"extension must start with '.' and name a suffix, got '{extension}'"
                )
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {v}") from e
        return v


class ServeConfig(BaseModel):
    host: NonEmptyStr = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)


class PreviewConfig(BaseModel):
    model_config = {"extra": "forbid"}

    panel: PanelConfig = Field(default_factory=PanelConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    serve: ServeConfig = Field(default_factory=ServeConfig)
