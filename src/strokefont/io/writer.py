"""Font writer for assembling glyphs into a TrueType font.

This module provides the FontWriter class which encodes finished glyph
records into a TrueType font with fonttools' FontBuilder.
"""

import re
from collections.abc import Sequence
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont

from strokefont.config import StrokeFontSettings
from strokefont.domain import Contour, Glyph
from strokefont.exceptions import FontSaveError


def _draw_contour(pen: TTGlyphPen, contour: Contour) -> None:
    # TrueType fills clockwise outer contours; the pipeline emits them
    # counter-clockwise, so every ring is written reversed.
    points = contour.reversed().points
    pen.moveTo((int(points[0].x), int(points[0].y)))
    for point in points[1:]:
        pen.lineTo((int(point.x), int(point.y)))
    pen.closePath()


def postscript_name(family: str, style: str) -> str:
    """Build a PostScript name: no spaces, ASCII only, at most 63 chars."""
    raw = f"{family}-{style}".replace(" ", "")
    return re.sub(r"[^A-Za-z0-9-]", "", raw)[:63] or "Strokefont-Regular"


class FontWriter:
    """Writes glyph records to a TrueType font.

    Example:
        writer = FontWriter(result.glyphs, settings)
        writer.save(Path("Alphabet.ttf"))
    """

    def __init__(self, glyphs: Sequence[Glyph], settings: StrokeFontSettings) -> None:
        """Initialize the font writer.

        Args:
            glyphs: Finished glyphs, undefined glyph first
            settings: Build settings (layout metrics and naming)
        """
        if not glyphs or not glyphs[0].is_notdef():
            raise ValueError("glyph list must start with the undefined glyph")

        self._glyphs = list(glyphs)
        self._settings = settings

    def build(self) -> TTFont:
        """Assemble the font in memory.

        Returns:
            fonttools TTFont ready to be saved
        """
        layout = self._settings.layout
        naming = self._settings.naming

        glyph_order: list[str] = []
        glyf: dict[str, object] = {}
        hmtx: dict[str, tuple[int, int]] = {}
        cmap: dict[int, str] = {}

        for glyph in self._glyphs:
            pen = TTGlyphPen(None)
            for contour in glyph.outline.contours:
                _draw_contour(pen, contour)

            glyph_order.append(glyph.name)
            glyf[glyph.name] = pen.glyph()
            lsb = 0 if glyph.is_empty() else int(glyph.metrics.bbox.min_x)
            hmtx[glyph.name] = (glyph.advance_width, lsb)
            if glyph.unicode is not None:
                cmap[glyph.unicode] = glyph.name

        inked = [g.advance_width for g in self._glyphs if g.advance_width > 0]
        avg_width = round(sum(inked) / len(inked)) if inked else layout.units_per_em // 2

        fb = FontBuilder(layout.units_per_em, isTTF=True)
        fb.setupGlyphOrder(glyph_order)
        fb.setupCharacterMap(cmap)
        fb.setupGlyf(glyf)
        fb.setupHorizontalMetrics(hmtx)
        fb.setupHorizontalHeader(ascent=layout.ascender, descent=layout.descender)
        fb.setupMaxp()
        fb.setupOS2(
            sTypoAscender=layout.ascender,
            sTypoDescender=layout.descender,
            sTypoLineGap=0,
            usWinAscent=layout.ascender,
            usWinDescent=-layout.descender,
            xAvgCharWidth=avg_width,
            usWeightClass=400,
            usWidthClass=5,
        )
        fb.setupPost()
        fb.setupNameTable(
            {
                "familyName": naming.family_name,
                "styleName": naming.style_name,
                "fullName": f"{naming.family_name} {naming.style_name}",
                "psName": postscript_name(naming.family_name, naming.style_name),
                "version": f"Version {naming.version}",
            }
        )

        return fb.font

    def save(self, output_path: Path) -> None:
        """Build and save the font file.

        Raises:
            FontSaveError: If the font cannot be built or written
        """
        try:
            font = self.build()
            font.save(str(output_path))
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise FontSaveError(str(output_path), str(e)) from e

    @staticmethod
    def get_output_path(source_path: Path) -> Path:
        """Generate the default font path for a glyph source.

        Converts: alphabet.json -> alphabet.ttf
        """
        return source_path.with_suffix(".ttf")
