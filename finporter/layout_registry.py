"""
Layout loader for finporter.

Loads layout YAML files from finporter/layouts/ and provides structured
access via Pydantic models. Each layout belongs to one vendor importer
(keyed by ``importer_id``) and defines the regular expressions that
importer uses:
- header_pattern: tested against a detection prefix (binary match)
- block_pattern: one self-contained section (title line + table)
- table_pattern: the embedded delimited table inside a block
- title_pattern: named groups recovered from a block's first line
- exported_at_pattern: the banner timestamp (``exported_at`` group)

Why YAML instead of hardcoded:
- Vendors change column headers; the patterns are editable without
  touching the mapping code.
- Separation of structure knowledge (YAML) from field mapping (Python).

Patterns are written against ``\\n`` line endings (see
reader.decode_text) and compiled once per process.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator

from finporter.exceptions import LayoutNotFoundError

logger = logging.getLogger(__name__)

# Directory containing layout YAML files (sibling package)
_LAYOUTS_DIR = Path(__file__).parent / "layouts"


class Layout(BaseModel):
    """A complete layout definition loaded from YAML."""

    importer_id: str
    header_pattern: str
    block_pattern: str
    table_pattern: str | None = None
    title_pattern: str | None = None
    exported_at_pattern: str | None = None

    @field_validator(
        "header_pattern", "block_pattern", "table_pattern",
        "title_pattern", "exported_at_pattern",
    )
    @classmethod
    def _check_compiles(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Invalid pattern {value!r}: {exc}") from exc
        return value

    @property
    def header(self) -> re.Pattern[str]:
        return _compile(self.header_pattern)

    @property
    def block(self) -> re.Pattern[str]:
        return _compile(self.block_pattern)

    @property
    def table(self) -> re.Pattern[str] | None:
        return _compile(self.table_pattern) if self.table_pattern else None

    @property
    def title(self) -> re.Pattern[str] | None:
        return _compile(self.title_pattern) if self.title_pattern else None

    @property
    def exported_at(self) -> re.Pattern[str] | None:
        return _compile(self.exported_at_pattern) if self.exported_at_pattern else None


@lru_cache(maxsize=None)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def load_layout(path: Path) -> Layout:
    """Load a single layout YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    return Layout.model_validate(raw)


def load_all_layouts(layouts_dir: Path | None = None) -> dict[str, Layout]:
    """Load all layout YAML files, keyed by importer id.

    Files that fail to load are logged and skipped; the importer that
    needs them raises LayoutNotFoundError from ``get_layout``, which
    prospecting logs and skips like any other detection failure.

    Args:
        layouts_dir: Directory to scan for .yaml files. Defaults to
            the built-in layouts/ directory.
    """
    layouts_dir = layouts_dir or _LAYOUTS_DIR
    layouts: dict[str, Layout] = {}
    for yaml_path in sorted(layouts_dir.glob("*.yaml")):
        try:
            layout = load_layout(yaml_path)
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.warning("Failed to load layout from %s: %s", yaml_path, e)
            continue
        layouts[layout.importer_id] = layout
        logger.debug("Loaded layout: %s from %s", layout.importer_id, yaml_path)
    logger.info("Loaded %d layouts", len(layouts))
    return layouts


@lru_cache(maxsize=1)
def _builtin_layouts() -> dict[str, Layout]:
    return load_all_layouts()


def get_layout(importer_id: str) -> Layout:
    """Return the built-in layout for *importer_id* (loaded once per process).

    Raises:
        LayoutNotFoundError: If no layout file declares that importer id.
    """
    layouts = _builtin_layouts()
    if importer_id not in layouts:
        raise LayoutNotFoundError(f"No layout defined for importer '{importer_id}'")
    return layouts[importer_id]
