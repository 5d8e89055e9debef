"""
finporter: detect and decode brokerage exports into canonical schemas.

Public API surface:

- ``convert(source, ...)`` -- **recommended entry point**. Accepts a
  file path or raw bytes, works out which importer and schema apply
  (or uses the ones given), decodes, and serializes the accepted rows.
  Returns a ``ConversionResult`` that also carries the rejected rows.

- ``detect(source, ...)`` -- Run detection only. Returns
  ``{importer: {schema: [formats]}}`` for every importer that
  recognized the input.

- ``list_importers()`` -- The built-in importers, in registry order.

Lower-level building blocks (``Prospector``, the importer classes,
``export_rows``) are importable from their modules.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from finporter._pipeline import ConversionResult, run_conversion
from finporter.config import PorterConfig, load_config
from finporter.detect import Prospector, ProspectResult, default_importers
from finporter.importers.base import BaseImporter
from finporter.schemas import CanonicalSchema, SourceFormat

__all__ = [
    "convert",
    "detect",
    "list_importers",
    "CanonicalSchema",
    "ConversionResult",
    "PorterConfig",
    "SourceFormat",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _read_source(source: str | Path | bytes, url: str | None) -> tuple[bytes, str | None]:
    """Return the document bytes and its origin.

    A path is read from disk and doubles as the origin unless *url* is
    given; bytes are used as-is.
    """
    if isinstance(source, bytes):
        return source, url
    path = Path(source)
    logger.info("Reading %s", path)
    return path.read_bytes(), url or str(path)


def _resolve_config(config: PorterConfig | str | Path | None) -> PorterConfig:
    if config is None:
        return PorterConfig()
    if isinstance(config, PorterConfig):
        return config
    return load_config(config)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def convert(
    source: str | Path | bytes,
    *,
    importer_id: str | None = None,
    target_schema: CanonicalSchema | str | None = None,
    output_format: SourceFormat | str | None = None,
    input_format: SourceFormat | str | None = None,
    url: str | None = None,
    time_of_day: str | None = None,
    time_zone: str | None = None,
    timestamp: datetime | None = None,
    config: PorterConfig | str | Path | None = None,
) -> ConversionResult:
    """Convert one exported document to rows of a canonical schema.

    Args:
        source: Path to the document, or its bytes.
        importer_id: Skip detection and use this importer
            (see ``list_importers()``).
        target_schema: Schema to produce. Required whenever the chosen
            importer detected (or supports) more than one.
        output_format: ``csv`` / ``tsv`` / ``json``; defaults to the
            config's ``output_format``.
        input_format: Source format hint for tabular documents.
        url: Origin of the document. Defaults to *source* when it is a path.
        time_of_day: Default ``HH:MM`` for dates without a time.
        time_zone: IANA zone for dates without a zone.
        timestamp: "As of" instant for rows that need one (e.g., prices).
        config: A PorterConfig or the path of a YAML config.

    Returns:
        A ``ConversionResult`` with accepted rows, rejected rows and
        the serialized output.

    Raises:
        ImporterNotRecognizedError: If *importer_id* is unknown.
        SourceFormatNotRecognizedError: If no importer recognizes the input.
        AmbiguityError: If several importers or schemas fit and the
            arguments do not pick one (the error lists the candidates).
        TargetSchemaNotSupportedError: If *target_schema* cannot be produced.
        DecodingError: If the document is not readable text or a table in
            it is broken.

    Examples::

        result = finporter.convert(
            "downloads/All-Accounts-Positions.csv",
            target_schema="holding",
        )
        result.rows            # accepted holdings
        result.rejected_rows   # e.g., "Account Total" lines
    """
    porter_config = _resolve_config(config)
    data, origin = _read_source(source, url)
    prospector = Prospector(options=porter_config.prospect)

    return run_conversion(
        data,
        porter_config,
        prospector,
        importer_id=importer_id,
        target_schema=target_schema,
        input_format=SourceFormat(input_format) if input_format else None,
        output_format=SourceFormat(output_format) if output_format else None,
        url=origin,
        time_of_day=time_of_day,
        time_zone=time_zone,
        timestamp=timestamp,
    )


def detect(
    source: str | Path | bytes,
    *,
    source_formats: list[SourceFormat] | None = None,
    config: PorterConfig | str | Path | None = None,
) -> ProspectResult:
    """Report which importers recognize *source* and what they could produce.

    Args:
        source: Path to the document, or its bytes.
        source_formats: Candidate formats; defaults to the config's.
        config: A PorterConfig or the path of a YAML config.

    Returns:
        ``{importer: {schema: [source formats]}}``; empty when nothing matched.
    """
    porter_config = _resolve_config(config)
    data, _ = _read_source(source, None)
    return Prospector(options=porter_config.prospect).prospect(data, source_formats)


def list_importers() -> list[BaseImporter]:
    """The built-in importers, in registry order."""
    return list(default_importers())
