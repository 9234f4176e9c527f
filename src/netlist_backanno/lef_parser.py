"""Parser for the macro geometry in LEF cell libraries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from netlist_backanno.errors import EmptyCatalogError, MalformedSectionError
from netlist_backanno.geometry import FillCatalog, Macro

logger = logging.getLogger(__name__)

# Named library sections, closed by "END <name>".
NAMED_SECTIONS = {"LAYER", "VIA", "VIARULE", "SITE"}
# Unnamed library sections, closed by "END <keyword>".
KEYWORD_SECTIONS = {"UNITS", "SPACING", "PROPERTYDEFINITIONS"}


class _Lines:
    """Tokenized line stream that tracks line numbers."""

    def __init__(self, f) -> None:
        self._f = f
        self.line_number = 0

    def __iter__(self) -> Iterator[list[str]]:
        for line in self._f:
            self.line_number += 1
            tokens = line.split("#", 1)[0].replace(";", " ; ").split()
            if tokens:
                yield tokens


def _skip_to_end(lines: Iterator[list[str]], name: str) -> bool:
    """Consume lines through 'END <name>'. False if the file ends first."""
    for tokens in lines:
        if tokens[0] == "END" and len(tokens) > 1 and tokens[1] == name:
            return True
    return False


def _to_grid(value: str, scale: int) -> int:
    return int(round(float(value) * scale))


def _parse_macro(
    name: str,
    lines: _Lines,
    it: Iterator[list[str]],
    scale: int,
    warnings: list[str],
) -> Macro | None:
    width = height = 0
    origin_x = origin_y = 0
    symmetry: tuple[str, ...] = ()

    for tokens in it:
        keyword = tokens[0]
        if keyword == "SIZE" and len(tokens) >= 4 and tokens[2] == "BY":
            width = _to_grid(tokens[1], scale)
            height = _to_grid(tokens[3], scale)
        elif keyword == "ORIGIN" and len(tokens) >= 3:
            origin_x = _to_grid(tokens[1], scale)
            origin_y = _to_grid(tokens[2], scale)
        elif keyword == "SYMMETRY":
            symmetry = tuple(t for t in tokens[1:] if t != ";")
        elif keyword == "PIN" and len(tokens) > 1:
            # Pin geometry is not needed for fill cells.
            if not _skip_to_end(it, tokens[1]):
                break
        elif keyword == "OBS":
            for inner in it:
                if inner == ["END"]:
                    break
        elif keyword == "END":
            found = tokens[1] if len(tokens) > 1 else ""
            if found != name:
                err = MalformedSectionError(lines.line_number, name, found)
                logger.warning(str(err))
                warnings.append(str(err))
            return Macro(
                name=name,
                width=width,
                height=height,
                origin_x=origin_x,
                origin_y=origin_y,
                symmetry=symmetry,
            )

    msg = f"Macro '{name}' not terminated before end of file"
    logger.warning(msg)
    warnings.append(msg)
    return None


def parse_lef(path: str | Path, scale: int = 100) -> tuple[list[Macro], list[str]]:
    """Parse all macros of a LEF file.

    Returns the macros in file order and the non-fatal irregularities found.
    """
    path = Path(path)
    macros: list[Macro] = []
    warnings: list[str] = []

    with open(path, "r") as f:
        lines = _Lines(f)
        it = iter(lines)
        for tokens in it:
            keyword = tokens[0]
            if keyword == "MACRO" and len(tokens) > 1:
                macro = _parse_macro(tokens[1], lines, it, scale, warnings)
                if macro is not None:
                    macros.append(macro)
            elif keyword in NAMED_SECTIONS and len(tokens) > 1 and tokens[1] != ";":
                _skip_to_end(it, tokens[1])
            elif keyword in KEYWORD_SECTIONS and (len(tokens) == 1 or tokens[1] != ";"):
                _skip_to_end(it, keyword)
            elif keyword == "END" and len(tokens) > 1 and tokens[1] == "LIBRARY":
                break
            # Anything else is a one-line library declaration.

    logger.debug("Parsed %d macros from %s", len(macros), path)
    return macros, warnings


def read_fill_catalog(path: str | Path, prefix: str, scale: int = 100) -> FillCatalog:
    """Return the macros whose name starts with prefix, widest first."""
    macros, warnings = parse_lef(path, scale)
    matching = [m for m in macros if m.name.startswith(prefix)]
    if not matching:
        raise EmptyCatalogError(prefix, path)
    return FillCatalog(prefix=prefix, macros=matching, warnings=warnings)
