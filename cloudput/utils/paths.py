"""Remote path helpers."""
import os
from typing import Optional

from ..errors import PathValidationError


def base_name(source: str) -> str:
    """Last element of a local path, ignoring trailing separators."""
    return os.path.basename(os.path.normpath(source))


def full_name(file_name: str, destination: str) -> str:
    """Join a file name onto a destination directory."""
    return destination.rstrip("/") + "/" + file_name


def validate_path(path: str) -> str:
    """
    Normalize a remote path and reject malformed ones.

    Relative paths are made absolute; trailing slashes are dropped.
    """
    if path is None or not path.strip():
        raise PathValidationError(path or "", "path is empty")
    value = path
    if "\x00" in value:
        raise PathValidationError(path, "path contains a NUL byte")
    if not value.startswith("/"):
        value = "/" + value
    value = value.rstrip("/")
    if not value:
        raise PathValidationError(path, "path names the root folder")

    for part in value.split("/")[1:]:
        if part == "":
            raise PathValidationError(path, "path has an empty segment")
        if part in {".", ".."}:
            raise PathValidationError(path, f"path segment {part!r} is not allowed")
    return value


def resolve_destination(source: str, destination: Optional[str] = None) -> str:
    """Remote path for source, under destination when one is given."""
    name = base_name(source)
    if destination:
        return validate_path(full_name(name, destination))
    return "/" + name
