"""Exception hierarchy for the sprite-importer framework."""


class ImporterError(Exception):
    """Base exception for all sprite-importer errors."""


class MalformedMetadataError(ImporterError):
    """Raised when a required section is missing from exported metadata.

    Attributes:
        section: Name of the missing key, section, or archive entry
            (e.g. ``"frames"``, ``"meta"``, ``"frameTags"``, ``"docData.json"``).
    """

    def __init__(self, section: str, detail: str = "") -> None:
        self.section = section
        message = f"Missing '{section}' in exported metadata"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ValidationError(ImporterError):
    """Raised when configuration or job validation fails."""


class ExternalToolError(ImporterError):
    """Raised when the external exporter fails or produces no output."""


class PipelineError(ImporterError):
    """Raised when pipeline stages are misused."""
