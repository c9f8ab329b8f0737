"""Pydantic models for catalog API resources and search results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

# Image format substituted for the {f} placeholder of artwork URL templates
ARTWORK_FORMAT = "png"


class MediaType(str, Enum):
    """Kind of catalog resource, taken from the resource's `type` field."""

    SONGS = "songs"
    ALBUMS = "albums"
    STATIONS = "stations"
    PLAYLISTS = "playlists"


class Artwork(BaseModel):
    """Artwork reference of a catalog resource.

    `url_template` contains `{w}`, `{h}` and `{f}` placeholders that are
    substituted to request an image of a given size and format.
    """

    model_config = ConfigDict(frozen=True)

    height: int
    width: int
    url_template: str

    def image_url(self, width: int, height: int) -> str:
        """Build the image URL for the given size.

        No validation is done on the result; a malformed template yields a
        malformed URL.
        """
        return (
            self.url_template.replace("{w}", str(int(width)))
            .replace("{h}", str(int(height)))
            .replace("{f}", ARTWORK_FORMAT)
        )


class MediaItem(BaseModel):
    """A single decoded catalog resource (song, album, ...)."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    name: str
    artist_name: str = " "
    artwork: Artwork
    type: MediaType


class ResultBucket(BaseModel):
    """A named group of same-type results, in source order."""

    model_config = ConfigDict(frozen=True)

    name: str
    items: list[MediaItem] = []


class DecodeFailure(BaseModel):
    """An item of a bucket that could not be decoded."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    index: int
    field: str
    message: str


class SearchResultSet(BaseModel):
    """Ordered buckets of a catalog search plus any per-item decode failures."""

    model_config = ConfigDict(frozen=True)

    buckets: list[ResultBucket] = []
    failures: list[DecodeFailure] = []

    @property
    def total(self) -> int:
        return sum(len(bucket.items) for bucket in self.buckets)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)

    def bucket(self, name: str) -> ResultBucket | None:
        """Return the bucket with the given name, if present."""
        for bucket in self.buckets:
            if bucket.name == name:
                return bucket
        return None


# ---------------------------------------------------------------------------
# HTTP API response models
# ---------------------------------------------------------------------------


class MediaItemResult(BaseModel):
    """A catalog item as returned by the search endpoint."""

    identifier: str
    name: str
    artist_name: str
    type: MediaType
    artwork_url: str
    artwork_width: int
    artwork_height: int


class SearchBucketResult(BaseModel):
    """A bucket as returned by the search endpoint."""

    name: str
    items: list[MediaItemResult] = []


class CatalogSearchResponse(BaseModel):
    """Response for a catalog search."""

    term: str
    storefront: str
    buckets: list[SearchBucketResult] = []
    failures: list[DecodeFailure] = []
    total: int = 0
    partial: bool = False


class StorefrontResponse(BaseModel):
    """Response for a storefront lookup."""

    storefront: str
