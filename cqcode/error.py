from contextlib import contextmanager
import sys
import traceback
import cqcode.logger as log

# Initialize logger
l = log.get_logger()


# ---------------------------------------------------------------------------
# Segment error taxonomy
# ---------------------------------------------------------------------------

class SegmentError(ValueError):
    """Base for every failure to decode or resolve a segment.

    ``raw`` is the offending wire substring (or JSON text) and ``field`` the
    field name involved, when there is one.
    """

    def __init__(self, message: str, raw: str | None = None, field: str | None = None):
        super().__init__(message)
        self.raw = raw
        self.field = field


class MalformedSegment(SegmentError):
    """Broken bracket or brace syntax; also the base of all codec failures."""


class TagMismatch(MalformedSegment):
    """The decoded tag is not the tag of the requested shape."""


class UnknownField(MalformedSegment):
    """A field name in the payload is not declared by the shape."""


class FieldTypeError(MalformedSegment):
    """A field value cannot be parsed into its declared type."""


class UnknownShape(SegmentError):
    """The tag is not registered in the segment catalog."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _handle_uncaught_exceptions(exc_type, exc_value, exc_traceback):
    """Global exception handler for uncaught exceptions."""
    if issubclass(exc_type, KeyboardInterrupt):
        # Call default handler for keyboard interrupt (e.g. Ctrl+C)
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    # Log the full traceback for debugging
    l.critical(
        "Unhandled exception caught:\n"
        + ''.join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    )


def install_excepthook() -> None:
    """Route uncaught exceptions through the logger (CLI entry point only)."""
    sys.excepthook = _handle_uncaught_exceptions


def raise_and_log(message: str, exception_type: type = SegmentError, **context):
    """
    Log a decode failure at debug level and then raise it.

    Callers decide whether a bad segment is worth reporting, so the codec
    itself only leaves a debug trace.

    :param message: Error message to log and include in the exception.
    :param exception_type: Type of exception to raise (default: SegmentError).
    :param context: Extra keyword arguments for the exception (``raw``, ``field``).
    """
    l.debug(f"Raising {exception_type.__name__}: {message}")
    raise exception_type(message, **context)


@contextmanager
def catch_and_log(context_info: str = ""):
    """
    Context manager that logs an exception with some context and re-raises it.

    :param context_info: Optional context info to include in the log.
    """
    try:
        yield
    except Exception as e:
        msg = f"Exception caught in context '{context_info}': {e}"
        l.error(msg)
        raise
