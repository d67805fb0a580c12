"""Data models for icon candidates and cached icons."""

from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class IconDescriptor(BaseModel):
    """One declared icon: where it lives, which sizes it claims and how it was declared."""

    uri: str
    sizes: str | list[str] = Field(
        default_factory=list,
        description="Raw size tokens, either a space-delimited string or a list of them",
    )
    rel: str | None = None


class PlaceIcon(BaseModel):
    """An icon declared by a page `<link>` tag, keyed by its URI in `PlaceIcons`."""

    sizes: list[str] = Field(default_factory=list)
    rel: str | None = None


class ManifestIcon(BaseModel):
    """An entry of a web app manifest `icons` array."""

    model_config = ConfigDict(extra="ignore")

    src: str
    sizes: str | list[str] = ""


class WebManifest(BaseModel):
    """The part of a web app manifest used for icon selection."""

    model_config = ConfigDict(extra="ignore")

    icons: list[ManifestIcon] | None = None


class WebManifestSite(BaseModel):
    """A web app manifest together with the URL it was loaded from."""

    model_config = ConfigDict(populate_by_name=True)

    web_manifest_url: str | None = Field(default=None, alias="webManifestUrl")
    web_manifest: WebManifest | None = Field(default=None, alias="webManifest")


class SizeCandidate(BaseModel):
    """The icon offering a given size in a `SizeTable`."""

    uri: str
    rel: str | None = None


class CachedIcon(BaseModel):
    """Downloaded icon bytes and the length of their larger edge, in pixels."""

    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    blob: bytes
    size: int


PlaceIcons = dict[str, PlaceIcon]

# Edge length in pixels -> the candidate declaring it.
SizeTable = dict[int, SizeCandidate]

_place_icons_adapter: TypeAdapter[PlaceIcons] = TypeAdapter(PlaceIcons)


def to_place_icons(value: Mapping[str, Any] | Sequence[Any] | None) -> PlaceIcons:
    """Validate page icons given either as models or as plain dictionaries.

    An empty or missing value yields an empty mapping.
    """
    if not value:
        return {}
    return _place_icons_adapter.validate_python(value)


def to_web_manifest_site(
    value: WebManifestSite | Mapping[str, Any] | None,
) -> WebManifestSite:
    """Validate a manifest site given either as a model or as a plain dictionary."""
    if value is None:
        return WebManifestSite()
    if isinstance(value, WebManifestSite):
        return value
    return WebManifestSite.model_validate(value)
