"""Exception types raised by the geometry engine."""


class PlanetVectorsError(Exception):
    """Base class for all planet_vectors errors."""


class MalformedGeometryError(PlanetVectorsError, ValueError):
    """Geometry text could not be parsed, or describes an unsupported shape (holes, empty)."""


class UnsupportedGeometryError(PlanetVectorsError, ValueError):
    """An operation was given a geometry type it does not handle."""


class FormulaNonConvergenceError(PlanetVectorsError, ArithmeticError):
    """An iterative formula exhausted its iteration budget."""
