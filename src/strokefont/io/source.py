"""Glyph source loading.

This module provides the GlyphSource class: a scoped handle on a JSON file
that maps characters to path descriptions. The file is read lazily on first
access and released by close(), so the pipeline never depends on a
module-level cache of source data.
"""

import json
from collections.abc import Iterator, Mapping
from pathlib import Path

from strokefont.exceptions import GlyphSourceError


class GlyphSource(Mapping[str, str]):
    """Lazily-loaded mapping of character to path description.

    Example:
        with GlyphSource(Path("alphabet.json")) as source:
            result = FontPipeline(settings).build(source)
    """

    def __init__(self, source_path: Path | None = None) -> None:
        """Initialize the glyph source.

        Args:
            source_path: Path to a JSON object of ``{"A": "M0 0L...", ...}``
        """
        self._source_path = source_path
        self._paths: dict[str, str] | None = None
        self._closed = False

    @classmethod
    def from_mapping(cls, paths: Mapping[str, str]) -> "GlyphSource":
        """Wrap in-memory path data."""
        source = cls()
        source._paths = dict(paths)
        return source

    @property
    def path(self) -> Path | None:
        return self._source_path

    @property
    def is_loaded(self) -> bool:
        return self._paths is not None

    def load(self) -> dict[str, str]:
        """Read the source file, once.

        Returns:
            Mapping of character to path string

        Raises:
            FileNotFoundError: If the source file does not exist
            GlyphSourceError: If the file is not a JSON object of strings
            RuntimeError: If the source has been closed
        """
        if self._closed:
            raise RuntimeError("Glyph source closed.")
        if self._paths is not None:
            return self._paths
        if self._source_path is None:
            raise GlyphSourceError("<memory>", "no source path given")
        if not self._source_path.exists():
            raise FileNotFoundError(f"Glyph source not found: {self._source_path}")

        try:
            data = json.loads(self._source_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise GlyphSourceError(str(self._source_path), str(e)) from e

        if not isinstance(data, dict):
            raise GlyphSourceError(str(self._source_path), "expected a JSON object")
        for character, path in data.items():
            if not isinstance(path, str):
                raise GlyphSourceError(
                    str(self._source_path),
                    f"path for {character!r} is {type(path).__name__}, expected string",
                )

        self._paths = data
        return data

    def _loaded(self) -> dict[str, str]:
        return self._paths if self._paths is not None else self.load()

    def __getitem__(self, character: str) -> str:
        return self._loaded()[character]

    def __iter__(self) -> Iterator[str]:
        return iter(self._loaded())

    def __len__(self) -> int:
        return len(self._loaded())

    @property
    def characters(self) -> str:
        """All characters in source order, as one string."""
        return "".join(self._loaded())

    def close(self) -> None:
        """Release loaded data; further access raises RuntimeError."""
        self._paths = None
        self._closed = True

    def __enter__(self) -> "GlyphSource":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
