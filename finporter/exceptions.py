"""
Custom exception hierarchy for finporter.

Why a custom hierarchy:
- Callers can tell an ambiguous input (which needs their choice) apart
  from an unreadable one without relying on generic ValueError.
- Ambiguity errors carry the full candidate list so a caller can present
  the choices instead of parsing a message string.

Row-level problems are never raised; they go to the rejected-rows
output of a decode call.
"""

from __future__ import annotations

from collections.abc import Iterable


def _ids(items: Iterable[object]) -> list[str]:
    """Render schemas / importers by their stable identifiers."""
    return [getattr(item, "id", None) or getattr(item, "value", None) or str(item) for item in items]


class FinporterError(Exception):
    """Base exception for all finporter errors."""


class CapabilityNotImplementedError(FinporterError, NotImplementedError):
    """Raised when an importer capability is deliberately left unimplemented."""

    def __init__(self, message: str = "Not implemented.") -> None:
        super().__init__(message)


class EncodingError(FinporterError):
    """Raised when decoded rows cannot be serialized to the requested format."""


class DecodingError(FinporterError):
    """Raised when input bytes cannot be interpreted.

    Either the bytes are not valid text, or an embedded table is
    structurally unparseable. Fatal for the decode call.
    """


class AmbiguityError(FinporterError):
    """Base for errors that need the caller to pick one of several candidates."""

    def __init__(self, message: str, candidates: Iterable[object]) -> None:
        self.candidates = list(candidates)
        super().__init__(f"{message} {_ids(self.candidates)}")


class NeedExplicitOutputSchemaError(AmbiguityError):
    """Raised by decode when an importer supports several schemas and none was given."""

    def __init__(self, candidates: Iterable[object]) -> None:
        super().__init__("Requires explicit target schema. Supported:", candidates)


class MultipleOutputSchemasMatchError(AmbiguityError):
    """Raised when an explicitly chosen importer produces more than one schema."""

    def __init__(self, candidates: Iterable[object]) -> None:
        super().__init__("Multiple output schemas match. Need to disambiguate. Schemas:", candidates)


class MultipleDetectedSchemasMatchError(AmbiguityError):
    """Raised when the detected importer recognized more than one schema in the input."""

    def __init__(self, candidates: Iterable[object]) -> None:
        super().__init__("Multiple detected schemas match. Need to disambiguate. Schemas:", candidates)


class MultipleImportersMatchError(AmbiguityError):
    """Raised when more than one importer recognized the input.

    There is no priority order among importers; the caller must pass an
    explicit importer id.
    """

    def __init__(self, candidates: Iterable[object]) -> None:
        super().__init__("Multiple importers match. Need to disambiguate. Importers:", candidates)


class TargetSchemaNotSupportedError(FinporterError):
    """Raised when the requested schema is not one the importer can produce."""

    def __init__(self, supported: Iterable[object]) -> None:
        self.supported = list(supported)
        super().__init__(f"Supported target schema: {_ids(self.supported)}")


class SourceFormatNotRecognizedError(FinporterError):
    """Raised when no registered importer detected anything in the input."""

    def __init__(self, message: str = "Source format not recognized.") -> None:
        super().__init__(message)


class ImporterNotRecognizedError(FinporterError):
    """Raised when the caller supplied an unknown importer id."""


class ConfigValidationError(FinporterError):
    """Raised when a finporter YAML config file is empty or malformed.

    Field-level problems surface as pydantic.ValidationError instead.
    """


class LayoutNotFoundError(FinporterError, KeyError):
    """Raised when a vendor importer has no layout file (missing or failed to load)."""
