"""Decoding of catalog API JSON payloads into catalog models.

Every decoder validates the fields it needs and raises `MissingFieldError`
naming the first absent (or wrongly typed) field. Search payloads are decoded
item by item: an item that fails is recorded as a `DecodeFailure` and its
siblings are still returned.
"""

import logging
from collections.abc import Mapping
from typing import Any

from catalog.models import (
    Artwork,
    DecodeFailure,
    MediaItem,
    MediaType,
    ResultBucket,
    SearchResultSet,
)
from core.exceptions import MissingFieldError

logger = logging.getLogger(__name__)

# Response root keys
RESULTS_KEY = "results"
DATA_KEY = "data"

# Resource keys
ID_KEY = "id"
TYPE_KEY = "type"
ATTRIBUTES_KEY = "attributes"
NAME_KEY = "name"
ARTIST_NAME_KEY = "artistName"
ARTWORK_KEY = "artwork"

# Artwork keys
HEIGHT_KEY = "height"
WIDTH_KEY = "width"
URL_KEY = "url"

# Buckets recognized in a search response, in the order they are returned
SEARCH_BUCKETS = (MediaType.SONGS.value, MediaType.ALBUMS.value)

DEFAULT_ARTIST_NAME = " "


def _require_str(json: Mapping[str, Any], key: str) -> str:
    value = json.get(key)
    if not isinstance(value, str):
        raise MissingFieldError(key)
    return value


def _require_int(json: Mapping[str, Any], key: str) -> int:
    value = json.get(key)
    # bool is an int subclass but never a valid dimension
    if not isinstance(value, int) or isinstance(value, bool):
        raise MissingFieldError(key)
    return value


def _require_object(json: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = json.get(key)
    if not isinstance(value, Mapping):
        raise MissingFieldError(key)
    return value


def decode_artwork(json: Any) -> Artwork:
    """Decode an artwork object.

    Raises:
        MissingFieldError: If `height`, `width` or `url` is absent
    """
    if not isinstance(json, Mapping):
        raise MissingFieldError(ARTWORK_KEY)

    return Artwork(
        height=_require_int(json, HEIGHT_KEY),
        width=_require_int(json, WIDTH_KEY),
        url_template=_require_str(json, URL_KEY),
    )


def decode_item(json: Any) -> MediaItem:
    """Decode a catalog resource object into a MediaItem.

    `attributes.artistName` defaults to a single space when absent. An unknown
    `type` is reported the same way as a missing one.

    Raises:
        MissingFieldError: If a required field is absent
    """
    if not isinstance(json, Mapping):
        raise MissingFieldError(ID_KEY)

    identifier = _require_str(json, ID_KEY)

    type_string = _require_str(json, TYPE_KEY)
    try:
        media_type = MediaType(type_string)
    except ValueError:
        raise MissingFieldError(TYPE_KEY, details={"value": type_string}) from None

    attributes = _require_object(json, ATTRIBUTES_KEY)
    name = _require_str(attributes, NAME_KEY)

    artist_name = attributes.get(ARTIST_NAME_KEY)
    if not isinstance(artist_name, str):
        artist_name = DEFAULT_ARTIST_NAME

    artwork = decode_artwork(_require_object(attributes, ARTWORK_KEY))

    return MediaItem(
        identifier=identifier,
        name=name,
        artist_name=artist_name,
        artwork=artwork,
        type=media_type,
    )


def resolve_image_url(artwork: Artwork, width: int, height: int) -> str:
    """Substitute width, height and the image format into the artwork template."""
    return artwork.image_url(width, height)


def decode_bucket(name: str, items: list[Any]) -> tuple[ResultBucket, list[DecodeFailure]]:
    """Decode every item of a bucket independently.

    Args:
        name: Bucket name (e.g. "songs")
        items: Raw resource objects from the bucket's `data` array

    Returns:
        Tuple of the bucket with the decoded items (source order preserved)
        and the failures for items that could not be decoded
    """
    decoded: list[MediaItem] = []
    failures: list[DecodeFailure] = []

    for index, raw in enumerate(items):
        try:
            decoded.append(decode_item(raw))
        except MissingFieldError as e:
            logger.warning(f"Skipping {name}[{index}]: {e.message}")
            failures.append(
                DecodeFailure(bucket=name, index=index, field=e.field_name, message=e.message)
            )

    return ResultBucket(name=name, items=decoded), failures


def decode_search_results(payload: Any) -> SearchResultSet:
    """Decode a catalog search response body.

    Only the `songs` and `albums` buckets are recognized and they are always
    returned in that order; other bucket names are ignored. A bucket without
    a `data` array is skipped.

    Raises:
        MissingFieldError: If the payload has no `results` object
    """
    if not isinstance(payload, Mapping):
        raise MissingFieldError(RESULTS_KEY)
    results = _require_object(payload, RESULTS_KEY)

    buckets: list[ResultBucket] = []
    failures: list[DecodeFailure] = []

    for name in SEARCH_BUCKETS:
        section = results.get(name)
        if not isinstance(section, Mapping):
            continue

        data = section.get(DATA_KEY)
        if not isinstance(data, list):
            logger.debug(f"Bucket '{name}' has no data array, skipping")
            continue

        bucket, bucket_failures = decode_bucket(name, data)
        buckets.append(bucket)
        failures.extend(bucket_failures)

    ignored = [key for key in results if key not in SEARCH_BUCKETS]
    if ignored:
        logger.debug(f"Ignoring unrecognized buckets: {ignored}")

    return SearchResultSet(buckets=buckets, failures=failures)


def decode_storefront_id(payload: Any) -> str:
    """Decode the storefront identifier from the first element of `data`.

    Raises:
        MissingFieldError: If `data` is absent or its first element has no `id`
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get(DATA_KEY), list):
        raise MissingFieldError(DATA_KEY)

    data = payload[DATA_KEY]
    if not data or not isinstance(data[0], Mapping):
        raise MissingFieldError(ID_KEY)

    return _require_str(data[0], ID_KEY)
