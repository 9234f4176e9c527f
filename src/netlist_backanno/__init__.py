"""Back-annotation of fill, power-strap and antenna cells into layout netlists."""

__version__ = "0.1.0"
