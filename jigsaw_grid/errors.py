"""Exceptions raised while generating a puzzle grid."""


class JigsawGridError(Exception):
    """Base class for all puzzle generation errors."""


class InvalidGridDimensions(JigsawGridError, ValueError):
    """Rows or columns are not positive integers."""


class InvalidImageDimensions(JigsawGridError, ValueError):
    """The source image width or height is not positive."""


class InvalidStudConfig(JigsawGridError, ValueError):
    """A stud shape factor is out of range."""


class InconsistentNeighborReference(JigsawGridError):
    """The neighbor table violates an interlocking invariant.

    This is an internal fault. Generation is aborted and no piece data is
    returned.
    """


class RandomSourceError(JigsawGridError):
    """The random source could not be seeded or produced an invalid value."""


class InvalidFillBleed(JigsawGridError, ValueError):
    """The drawable-region margin is negative or not finite."""
