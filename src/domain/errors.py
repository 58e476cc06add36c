from __future__ import annotations


class ResponsiveImagesError(Exception):
    """Base class for errors raised while computing responsive image sets."""


class AssetNotFoundError(ResponsiveImagesError):
    """The source reference could not be resolved to an asset.

    Callers are expected to branch on this one and render nothing.
    """

    def __init__(self, reference: object) -> None:
        self.reference = reference
        super().__init__(f"Could not find asset for reference {reference!r}")


class InvalidDimensionError(ResponsiveImagesError):
    """A computed maximum width (or the asset's own size) is not positive."""


class TransformError(ResponsiveImagesError):
    """The transform engine failed to build or read a manipulated image."""
