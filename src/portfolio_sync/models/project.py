"""Project record models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProjectRecord(BaseModel):
    """A portfolio project as stored in proyectos.json.

    Field aliases are the on-disk and wire names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    id: int
    title: str | None = Field(default=None, alias="titulo")
    description: str | None = Field(default=None, alias="descripcion")
    file_name: str | None = Field(default=None, alias="archivoNombre")
    file_url: str | None = Field(default=None, alias="archivoURL")
    created_at: str | None = Field(default=None, alias="fecha")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ProjectUpdate(BaseModel):
    """Partial update; only fields present in the request are merged."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    title: str | None = Field(default=None, alias="titulo")
    description: str | None = Field(default=None, alias="descripcion")
    file_name: str | None = Field(default=None, alias="archivoNombre")
    file_url: str | None = Field(default=None, alias="archivoURL")
    created_at: str | None = Field(default=None, alias="fecha")

    def changes(self) -> dict:
        """Fields explicitly set, keyed by their stored names. ``id`` never changes."""
        data = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        data.pop("id", None)
        return data
