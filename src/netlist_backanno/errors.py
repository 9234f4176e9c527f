"""Exception taxonomy for back-annotation runs."""

from __future__ import annotations


class BackannoError(Exception):
    """Base class for all back-annotation errors."""


class EmptyCatalogError(BackannoError):
    """No macro in the geometry library matches the fill-cell prefix."""

    def __init__(self, prefix: str, path: object = None) -> None:
        where = f" in {path}" if path is not None else ""
        super().__init__(f"No macro matching prefix '{prefix}' found{where}")
        self.prefix = prefix


class MalformedSectionError(BackannoError):
    """A section terminator does not name the section being closed.

    Never raised out of the reader; instances are logged and kept on the
    catalog as warnings.
    """

    def __init__(self, line_number: int, expected: str, found: str) -> None:
        super().__init__(
            f"Line {line_number}: expected 'END {expected}', found 'END {found}'"
        )
        self.line_number = line_number
        self.expected = expected
        self.found = found


class MissingSubcircuitError(BackannoError):
    """A change-list cell type has no .subckt declaration in the pin-order library."""

    def __init__(self, cell_type: str, instance: str) -> None:
        super().__init__(
            f"No subcircuit '{cell_type}' in library; cannot insert instance '{instance}'"
        )
        self.cell_type = cell_type
        self.instance = instance


class NothingToAnnotate(BackannoError):
    """The antenna/fill report produced an empty change list.

    A valid terminal outcome, not a failure.
    """
