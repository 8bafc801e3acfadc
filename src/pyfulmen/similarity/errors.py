"""Errors raised by the similarity engine."""


class SimilarityError(Exception):
    """Base class for similarity engine errors."""


class InvalidAlgorithmError(SimilarityError, ValueError):
    """Raised when an algorithm tag is not recognized."""

    def __init__(self, algorithm: object, valid: list[str]):
        self.algorithm = algorithm
        self.valid = valid
        super().__init__(f"invalid algorithm: {algorithm!r}. Valid options: {', '.join(valid)}")


class WrongAPIError(SimilarityError):
    """Raised when a metric is requested through an entry point it does not support."""

    def __init__(self, algorithm: str, correct_api: str, message: str):
        self.algorithm = algorithm
        self.correct_api = correct_api
        super().__init__(message)
