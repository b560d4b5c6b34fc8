"""Exception hierarchy shared by extraction, acquisition and crawling.

Every error raised inside the reference graph engine is recoverable: the
worst outcome of a failed document or download is a graph with more
placeholder nodes than a complete run would leave.
"""


class RecoverableError(Exception):
    """Base class for recoverable errors.

    These errors indicate expected failure conditions that can be handled
    gracefully by skipping the current item and continuing processing.
    """
    pass


class FormatError(RecoverableError):
    """Text extraction error - can skip current document and continue.

    Raised when a document is malformed or its format is not supported
    by any text extractor.
    """

    def __init__(self, path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class AcquisitionError(RecoverableError):
    """Download error - the item stays absent and is retried next iteration.

    Raised by fetchers when a network or storage failure prevents a
    frontier item from being written to the document store.
    """
    pass


class CircuitBreakerTripped(RecoverableError):
    """Too many consecutive acquisition failures within one pass.

    Raised by the RFC acquisition loop; the remaining items of the pass
    are abandoned but the crawl continues with the next iteration.
    """

    def __init__(self, failures: int, abandoned: int) -> None:
        self.failures = failures
        self.abandoned = abandoned
        super().__init__(
            f"{failures} consecutive failures, abandoning {abandoned} remaining item(s)"
        )
