class OverlayError(RuntimeError):
    """Base class for every failure raised by the overlay engine."""


class InvalidOverlayInput(OverlayError, ValueError):
    """
    The request cannot be rendered as given: no text in either block,
    an unknown style value, or image data that does not decode.
    """


class OverlayRenderError(OverlayError):
    """Rasterizing or compositing failed and no fallback could recover it."""
