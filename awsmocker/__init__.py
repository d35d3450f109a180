"""Generate AWS SDK client mocks from the operations a Go module actually calls."""

__version__ = "0.1.0"
