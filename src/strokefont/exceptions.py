"""Exception hierarchy for Strokefont."""


class StrokeFontError(Exception):
    """Base exception for all Strokefont errors."""

    pass


class ConfigurationError(StrokeFontError, ValueError):
    """Structurally impossible build configuration.

    Raised before any glyph is processed; aborts the build.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid configuration: {message}")


class PathError(StrokeFontError):
    """Errors related to path descriptions."""

    pass


class MalformedPathError(PathError):
    """Unparseable or structurally invalid path description."""

    def __init__(self, character: str | None, reason: str) -> None:
        self.character = character
        self.reason = reason
        where = f" for '{character}'" if character is not None else ""
        super().__init__(f"Malformed path{where}: {reason}")


class GeometryError(StrokeFontError):
    """Errors in geometric calculations."""

    pass


class UnionFailureError(GeometryError):
    """Boolean union could not complete for a set of capsules."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Polygon union failed: {reason}")


class GlyphSourceError(StrokeFontError):
    """Error loading glyph source data."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load glyph source '{path}': {reason}")


class FontSaveError(StrokeFontError):
    """Error saving a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save font '{path}': {reason}")
