# standard library
import json
import os

from fnmatch import fnmatch
from pathlib import Path

# typing
from typing import Union

# third parties
from pydantic import BaseModel

# relative
from .types import JSON


class FileListing(BaseModel):
    """
    Implicit list of files, defined by patterns (relative to a folder) to include and to ignore.

    **Example**

    ```python
    FileListing(include=["*.js"], ignore=["node_modules", "*.min.js"])
    ```
    """

    include: list[str]
    """
    Patterns of the files to include, a pattern matching a folder includes all its content.
    """
    ignore: list[str] = []
    """
    Patterns to exclude, a folder matching one of them is not traversed.
    """


def parse_json(path: Union[str, Path]) -> JSON:
    with open(path, encoding="UTF-8") as fp:
        return json.load(fp)


def write_json(data: JSON, path: Path):
    with open(path, "w", encoding="UTF-8") as fp:
        json.dump(data, fp, indent=4)


def matching_files(
    folder: Union[Path, str], patterns: Union[list[str], FileListing]
) -> list[Path]:
    """
    Walk a folder and select the files matching the patterns.

    Parameters:
        folder: root folder, patterns apply on the paths relative to it
        patterns: patterns to include, or a [FileListing](@yw-nav-class:FileListing)

    Return:
        The selected files (absolute if `folder` is), ordered by folder then name.
    """
    folder = Path(folder)
    listing = (
        patterns
        if isinstance(patterns, FileListing)
        else FileListing(include=patterns)
    )
    include = [
        expanded
        for pattern in listing.include
        for expanded in (
            [f"{pattern}/*", f"{pattern}/**/*"]
            if (folder / pattern).is_dir()
            else [pattern]
        )
    ]

    def ignored(relative: Path) -> bool:
        return any(fnmatch(str(relative), pattern) for pattern in listing.ignore)

    def included(relative: Path) -> bool:
        return any(fnmatch(str(relative), pattern) for pattern in include)

    selected: list[Path] = []
    for root, dirs, files in os.walk(folder):
        relative_root = Path(root).relative_to(folder)
        dirs[:] = sorted(d for d in dirs if not ignored(relative_root / d))
        selected.extend(
            Path(root) / name
            for name in sorted(files)
            if not ignored(relative_root / name) and included(relative_root / name)
        )
    return selected
