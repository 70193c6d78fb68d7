"""Exceptions raised by shrink_it."""


class ShrinkItError(RuntimeError):
    """Base exception for shrink_it failures."""


class DecodeError(ShrinkItError):
    """Source bytes are not a readable image."""


class EncodeError(ShrinkItError):
    """The codec could not produce output for the requested parameters."""


class CompressionCancelled(ShrinkItError):
    """The caller cancelled a compression request."""


class MissingDependencyError(ShrinkItError):
    """Pillow was built without a codec that is needed."""


def raise_if_cancelled(cancel_event):
    """Raise CompressionCancelled when the event is set.

    Args:
        cancel_event: threading.Event or None
    """
    if cancel_event is not None and cancel_event.is_set():
        raise CompressionCancelled("Compression cancelled")
