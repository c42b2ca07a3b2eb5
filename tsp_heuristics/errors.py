class TSPError(Exception):
    """Base class for every error raised by tsp_heuristics."""


class InvalidDimension(TSPError, ValueError):
    """Matrix is not square, or a tour does not match the matrix size."""


class IndexOutOfRange(TSPError, IndexError):
    """A city index or tour position falls outside [0, N)."""


class InvalidConfiguration(TSPError, ValueError):
    """Engine settings or tour contents that no run can start from."""
