from __future__ import annotations


class ImageProcessingError(Exception):
    """Base class for every error raised by the image processing layers."""


class DimensionMismatchError(ImageProcessingError, ValueError):
    """Raised when an operation needs equally sized images and gets unequal ones."""


class InvalidRangeError(ImageProcessingError, ValueError):
    """Raised when a parameter falls outside its documented domain."""


class ImageNotFoundError(ImageProcessingError, KeyError):
    """Raised when an alias does not refer to any stored image."""

    def __str__(self):
        # KeyError quotes its argument, keep the plain message instead
        return str(self.args[0]) if self.args else ""


class InvalidImageNameError(ImageProcessingError, ValueError):
    """Raised when a name cannot be used as an image alias."""


class FileFormatError(ImageProcessingError, ValueError):
    """Raised for unsupported extensions or malformed image files."""


class UnknownOperationError(ImageProcessingError, KeyError):
    """Raised when a pipeline operation name is not registered."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""
