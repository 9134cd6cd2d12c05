"""Pairing rules for image URLs and their captions."""

from __future__ import annotations

from collections.abc import Sequence

from threadboard.core.errors import ValidationError
from threadboard.core.settings import settings


def _check_limit(image_paths: Sequence[str]) -> None:
    if len(image_paths) > settings.max_images_per_post:
        raise ValidationError(f"At most {settings.max_images_per_post} images are allowed")


def validate_images(image_paths: Sequence[str], captions: Sequence[str]) -> tuple[list[str], list[str]]:
    """Check a freshly submitted image list.

    Raises:
        ValidationError: If the lists differ in length or exceed the image cap.
    """
    if len(image_paths) != len(captions):
        raise ValidationError("image_paths and captions must have the same length")
    _check_limit(image_paths)
    return list(image_paths), list(captions)


def merge_images(
    current_paths: Sequence[str],
    current_captions: Sequence[str],
    image_paths: Sequence[str] | None,
    captions: Sequence[str] | None,
) -> tuple[list[str], list[str]]:
    """Resolve the image lists of an edit.

    Omitted lists keep their stored value. Images without a caption get an
    empty one, and removing every image removes every caption.

    Raises:
        ValidationError: If there are more captions than images, or too many images.
    """
    paths = list(current_paths if image_paths is None else image_paths)
    given = list(current_captions if captions is None else captions)
    if not paths:
        return [], []
    _check_limit(paths)
    if len(given) > len(paths):
        if captions is not None:
            raise ValidationError("More captions than images")
        given = given[: len(paths)]
    given.extend("" for _ in range(len(paths) - len(given)))
    return paths, given
