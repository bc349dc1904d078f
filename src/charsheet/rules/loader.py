"""Load 5etools reference JSON files from disk.

The rules core works on in-memory collections; this module is the one
place that reads them from a data directory. Each file holds a JSON
object whose list values are keyed by category ('race', 'spell',
'classFeature', ...). Collections from all files are merged by category
in file order.

Example:
    >>> from charsheet.rules.loader import build_index
    >>> index = build_index("data/5etools")
    >>> index.class_names()[:2]
    ['Barbarian', 'Bard']
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from charsheet.core.exceptions import DataLoadError
from charsheet.core.logging import get_logger
from charsheet.models.enums import EntityCategory
from charsheet.rules.index import RulesetIndex


if TYPE_CHECKING:
    from charsheet.core.config import Settings


logger = get_logger(__name__)

DATA_FILE_PATTERNS: tuple[str, ...] = (
    "races.json",
    "backgrounds.json",
    "feats.json",
    "spells-*.json",
    "items.json",
    "items-base.json",
    "class-*.json",
)
"""Files read from the data directory, in merge order."""

_CATEGORY_NAMES = frozenset(c.value for c in EntityCategory)


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Failed to read {path.name}", source_file=str(path)) from e
    if not isinstance(data, dict):
        raise DataLoadError(
            f"Expected a JSON object in {path.name}",
            source_file=str(path),
        )
    return data


def load_reference_data(data_dir: str | Path | None = None) -> dict[str, list[dict[str, Any]]]:
    """Read and merge the reference collections of a data directory.

    Args:
        data_dir: Directory of 5etools JSON files. Defaults to the
            configured ``ruleset.data_path``.

    Returns:
        Record lists by category name. Only known categories are kept.

    Raises:
        DataLoadError: If the directory is missing or a file is not valid JSON.
    """
    if data_dir is None:
        from charsheet.core.config import get_settings

        data_dir = get_settings().ruleset.data_path
    directory = Path(data_dir)
    if not directory.is_dir():
        raise DataLoadError("Reference data directory not found", source_file=str(directory))

    collections: dict[str, list[dict[str, Any]]] = {}
    files_read = 0
    for pattern in DATA_FILE_PATTERNS:
        for path in sorted(directory.glob(pattern)):
            data = _read_json(path)
            files_read += 1
            for category, records in data.items():
                if category in _CATEGORY_NAMES and isinstance(records, list):
                    collections.setdefault(category, []).extend(records)
            logger.debug("Reference file loaded", file=path.name)

    logger.info(
        "Reference data loaded",
        directory=str(directory),
        files=files_read,
        counts={category: len(records) for category, records in collections.items()},
    )
    return collections


def build_index(
    data_dir: str | Path | None = None,
    settings: Settings | None = None,
) -> RulesetIndex:
    """Load a data directory and index it for the configured ruleset.

    Args:
        data_dir: Directory of 5etools JSON files; ``settings.ruleset.data_path``
            if omitted.
        settings: Application settings; the cached singleton if omitted.

    Returns:
        A RulesetIndex filtered to the supported source and edition.
    """
    if settings is None:
        from charsheet.core.config import get_settings

        settings = get_settings()
    collections = load_reference_data(data_dir or settings.ruleset.data_path)
    return RulesetIndex(
        collections,
        supported_source=settings.ruleset.supported_source,
        supported_edition=settings.ruleset.supported_edition,
    )


__all__ = [
    "DATA_FILE_PATTERNS",
    "load_reference_data",
    "build_index",
]
