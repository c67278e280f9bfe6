"""
Entity path encoding and file path building.

Pure functions turning (slug, identity, locale) into the encoded entity
path stored on image records and back, plus the on-disk and public path
conventions for derived files.

Dependencies: None (pure domain layer)
System role: Deterministic path derivation shared by processors and routers
"""

import os
import re

from entity_images.core.exceptions import EncodingError

PATH_SEPARATOR = ":"
ORIGINAL_VARIANT = "original"
BLUR_SUFFIX = ".blur"

IDENTITY_PATTERN = r"[a-zA-Z0-9\-_]+"


def encode_entity_path(slug: str, identity: str, locale: str | None = None) -> str:
    """
    Join slug, identity and optional locale into an entity path.

    Args:
        slug: Schema slug
        identity: Owning entity identity
        locale: Locale for translatable schemas, None otherwise

    Returns:
        str: Encoded entity path

    Raises:
        EncodingError: If slug or identity contains the separator
    """
    for value in (slug, identity):
        if PATH_SEPARATOR in value:
            raise EncodingError(value)

    parts = [slug, identity]
    if locale is not None:
        parts.append(locale)
    return PATH_SEPARATOR.join(parts)


def decode_entity_path(entity_path: str) -> tuple[str | None, str | None, str | None]:
    """
    Split an entity path into (slug, identity, locale).

    Missing trailing fields are returned as None. Malformed input is not
    rejected; callers validate the fields downstream.
    """
    parts = entity_path.split(PATH_SEPARATOR) if entity_path else []
    parts = (parts + [None, None, None])[:3]
    return parts[0], parts[1], parts[2]


def _format_path(path: str, sep: str) -> str:
    path = path.replace("/", sep).replace("\\", sep)
    is_root = path.startswith(sep)

    absolutes: list[str] = []
    for part in path.split(sep):
        if part in ("", "."):
            continue
        if part == "..":
            if absolutes:
                absolutes.pop()
        else:
            absolutes.append(part)

    return (sep if is_root else "") + sep.join(absolutes)


def absolute_path(upload_root: str, project_root: str, *segments: str) -> str:
    """
    Build a normalised filesystem path below the project's web root.

    Args:
        upload_root: Upload directory, web-relative
        project_root: Absolute web root on disk
        *segments: Further path segments (usually a filename)

    Returns:
        str: Canonical path with no traversal above the root
    """
    return _format_path(os.sep.join([project_root, upload_root, *segments]), os.sep)


def web_path(upload_base: str, *segments: str) -> str:
    """Build a normalised '/'-separated public path below the upload base."""
    return _format_path("/".join([upload_base, *segments]), "/")


def derived_filename(image_id: str, variant: str, fmt: str, blurred: bool = False) -> str:
    """On-disk filename of one derived artifact."""
    return f"{image_id}-{variant}{BLUR_SUFFIX if blurred else ''}.{fmt}"


def public_filename(identity: str, variant: str, fmt: str) -> str:
    """Public filename of one variant: the original variant carries no suffix."""
    if variant == ORIGINAL_VARIANT:
        return f"{identity}.{fmt}"
    return f"{identity}-{variant}.{fmt}"


def parse_public_filename(
    filename: str,
    variant_names: list[str],
) -> tuple[str, str, str] | None:
    """
    Recover (identity, variant, format) from a public filename.

    A trailing ``-{variant}`` is only recognised for configured variant
    names, so identities may themselves contain dashes.

    Args:
        filename: Last segment of a public URL
        variant_names: Variant names configured for the schema

    Returns:
        tuple | None: Parsed fields, or None when the name does not match
    """
    named = [re.escape(name) for name in variant_names if name != ORIGINAL_VARIANT]
    if named:
        match = re.fullmatch(
            rf"(?P<identity>{IDENTITY_PATTERN}?)-(?P<variant>{'|'.join(named)})\.(?P<format>\w+)",
            filename,
        )
        if match:
            return match["identity"], match["variant"], match["format"]

    if ORIGINAL_VARIANT not in variant_names:
        return None

    match = re.fullmatch(rf"(?P<identity>{IDENTITY_PATTERN})\.(?P<format>\w+)", filename)
    if match:
        return match["identity"], ORIGINAL_VARIANT, match["format"]
    return None
