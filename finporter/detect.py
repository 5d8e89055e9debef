"""
Importer detection ("prospecting") for finporter.

Each registered importer inspects a prefix of the input and reports
which canonical schemas it could produce. The Prospector collects
those answers and the disambiguation step turns them into exactly one
(importer, schema) pair, or an error listing the candidates.

Design: Strategy Pattern
- Prospector.prospect() returns {importer: DetectResult} for every
  importer that recognized the input.
- Prospector.resolve() picks the importer and schema to decode with.
- The registry is an ordered list built once; the order only makes
  iteration deterministic. It is never used to break ties: when two
  importers match, the caller must choose.

Resolution algorithm:
1. Explicit importer id: look it up (unknown -> ImporterNotRecognizedError)
   and check the requested schema against the importer's declared
   output schemas. Without a requested schema the importer must
   produce exactly one.
2. No importer id: prospect.
   a. No match -> SourceFormatNotRecognizedError.
   b. Two or more -> MultipleImportersMatchError.
   c. One -> resolve the schema against what was *detected*.
      resolve_source() also reports the format it was detected under,
      so a raw tabular document needs no format hint.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from functools import lru_cache

from finporter.config import ProspectOptions
from finporter.exceptions import (
    DecodingError,
    ImporterNotRecognizedError,
    LayoutNotFoundError,
    MultipleDetectedSchemasMatchError,
    MultipleImportersMatchError,
    MultipleOutputSchemasMatchError,
    SourceFormatNotRecognizedError,
    TargetSchemaNotSupportedError,
)
from finporter.importers.base import BaseImporter, DetectResult
from finporter.schemas import CanonicalSchema, SourceFormat

logger = logging.getLogger(__name__)

ProspectResult = dict[BaseImporter, DetectResult]


@lru_cache(maxsize=1)
def default_importers() -> tuple[BaseImporter, ...]:
    """Build the default registry once. Imported lazily to avoid circular imports."""
    from finporter.importers.alloc_smart import AllocSmartImporter
    from finporter.importers.chuck_history import ChuckHistoryImporter
    from finporter.importers.chuck_positions import (
        ChuckPositionsAllImporter,
        ChuckPositionsIndivImporter,
    )
    from finporter.importers.chuck_sales import ChuckSalesImporter
    from finporter.importers.fido_history import FidoHistoryImporter
    from finporter.importers.fido_positions import FidoPositionsImporter
    from finporter.importers.fido_sales import FidoSalesImporter
    from finporter.importers.tabular import TabularImporter

    return (
        AllocSmartImporter(),
        ChuckHistoryImporter(),
        ChuckPositionsAllImporter(),
        ChuckPositionsIndivImporter(),
        ChuckSalesImporter(),
        FidoHistoryImporter(),
        FidoPositionsImporter(),
        FidoSalesImporter(),
        TabularImporter(),
    )


def _coerce_schema(target_schema: CanonicalSchema | str, supported: Sequence[CanonicalSchema]) -> CanonicalSchema:
    try:
        return CanonicalSchema(target_schema)
    except ValueError:
        raise TargetSchemaNotSupportedError(supported) from None


class Prospector:
    """Registry over importers plus the detection / disambiguation logic.

    Read-only after construction, so one instance can be shared across
    threads.

    Args:
        importers: Importers in registry order. Defaults to every
            built-in importer.
        options: Prefix size and candidate formats for prospecting.
    """

    def __init__(
        self,
        importers: Iterable[BaseImporter] | None = None,
        options: ProspectOptions | None = None,
    ) -> None:
        self.importers: tuple[BaseImporter, ...] = (
            tuple(importers) if importers is not None else default_importers()
        )
        self.options = options or ProspectOptions()
        source_map: dict[SourceFormat, list[BaseImporter]] = {}
        for importer in self.importers:
            for source_format in importer.source_formats:
                source_map.setdefault(source_format, []).append(importer)
        self._source_map = {fmt: tuple(found) for fmt, found in source_map.items()}

    @property
    def source_map(self) -> dict[SourceFormat, tuple[BaseImporter, ...]]:
        """SourceFormat -> importers declaring support for it."""
        return dict(self._source_map)

    def get(self, importer_id: str) -> BaseImporter | None:
        """Look up an importer by id; ``None`` when unknown."""
        for importer in self.importers:
            if importer.id == importer_id:
                return importer
        return None

    def prospect(
        self,
        data: bytes,
        source_formats: Iterable[SourceFormat] | None = None,
    ) -> ProspectResult:
        """Run detection over every importer supporting a candidate format.

        Only the first ``options.prefix_bytes`` bytes are inspected.
        Detection failures inside one importer are logged and skipped.

        Args:
            data: The document (or at least its prefix).
            source_formats: Candidate formats. Defaults to the configured ones.

        Returns:
            Importer -> DetectResult, for importers that matched, in
            registry order. Detected formats are limited to the candidates.
        """
        formats = list(source_formats) if source_formats is not None else list(self.options.source_formats)
        prefix = data[: self.options.prefix_bytes]

        result: ProspectResult = {}
        for importer in self.importers:
            if not any(fmt in formats for fmt in importer.source_formats):
                continue
            try:
                detected = importer.detect(prefix)
            except (DecodingError, LayoutNotFoundError) as exc:
                logger.warning("Detection failed for importer '%s': %s", importer.id, exc)
                continue
            detected = {
                schema: [fmt for fmt in found if fmt in formats]
                for schema, found in detected.items()
            }
            detected = {schema: found for schema, found in detected.items() if found}
            if detected:
                result[importer] = detected

        logger.info(
            "Prospected %d bytes: %d importer(s) matched %s",
            len(prefix), len(result), [importer.id for importer in result],
        )
        return result

    def resolve(
        self,
        data: bytes,
        importer_id: str | None = None,
        target_schema: CanonicalSchema | str | None = None,
        source_formats: Iterable[SourceFormat] | None = None,
    ) -> tuple[BaseImporter, CanonicalSchema]:
        """Choose exactly one importer and schema for *data*.

        Raises:
            ImporterNotRecognizedError: Unknown *importer_id*.
            TargetSchemaNotSupportedError: *target_schema* not producible.
            MultipleOutputSchemasMatchError: Explicit importer, no schema
                given, and the importer produces several.
            SourceFormatNotRecognizedError: Nothing detected the input.
            MultipleImportersMatchError: Several importers detected it.
            MultipleDetectedSchemasMatchError: One importer detected
                several schemas and no schema was given.
        """
        importer, schema, _ = self.resolve_source(data, importer_id, target_schema, source_formats)
        return importer, schema

    def resolve_source(
        self,
        data: bytes,
        importer_id: str | None = None,
        target_schema: CanonicalSchema | str | None = None,
        source_formats: Iterable[SourceFormat] | None = None,
    ) -> tuple[BaseImporter, CanonicalSchema, SourceFormat | None]:
        """Like resolve(), plus the source format the input was detected as.

        The format is ``None`` when the importer was named explicitly
        (nothing was detected) or when the schema was recognized under
        more than one format.
        """
        if importer_id is not None:
            importer = self.get(importer_id)
            if importer is None:
                raise ImporterNotRecognizedError(f"Importer not recognized. '{importer_id}'")
            supported = list(importer.output_schemas)
            if target_schema is not None:
                schema = _coerce_schema(target_schema, supported)
                if schema not in supported:
                    raise TargetSchemaNotSupportedError(supported)
                return importer, schema, None
            if len(supported) != 1:
                raise MultipleOutputSchemasMatchError(supported)
            return importer, supported[0], None

        prospected = self.prospect(data, source_formats)
        if not prospected:
            raise SourceFormatNotRecognizedError()
        if len(prospected) > 1:
            raise MultipleImportersMatchError(list(prospected))

        importer, detected = next(iter(prospected.items()))
        detected_schemas = list(detected)
        if target_schema is not None:
            schema = _coerce_schema(target_schema, detected_schemas)
            if schema not in detected_schemas:
                raise TargetSchemaNotSupportedError(detected_schemas)
        elif len(detected_schemas) != 1:
            raise MultipleDetectedSchemasMatchError(detected_schemas)
        else:
            schema = detected_schemas[0]
        formats = detected[schema]
        return importer, schema, formats[0] if len(formats) == 1 else None
