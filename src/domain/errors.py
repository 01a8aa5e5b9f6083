"""Error taxonomy for the transform pipeline.

Every error is terminal for the request that raised it. The HTTP layer maps
each class to a status code in ``src.infrastructure.api.errors``.
"""
from __future__ import annotations


class ImageApiError(ValueError):
    """Base class for all request-scoped pipeline errors."""

    message = "Image request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


# --- upload checks ---
class PayloadTooLarge(ImageApiError):
    message = "The file is too large."


class NotAnImage(ImageApiError):
    message = "The file is not an image."


class NoFileProvided(ImageApiError):
    message = "Please input a file."


# --- command parsing ---
class ParseError(ImageApiError):
    message = "Invalid command list."


class NoParametersSpecified(ParseError):
    message = "No parameters specified."


class UnrecognizedCommand(ParseError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unrecognized command: '{name}'.")


class MalformedCommandArgument(ParseError):
    def __init__(self, token: str, reason: str = "expected an integer argument") -> None:
        self.token = token
        super().__init__(f"Malformed command '{token}': {reason}.")


# --- format resolution ---
class FormatError(ImageApiError):
    message = "Unsupported file."


class MissingExtension(FormatError):
    message = "The file name has no extension; expected .png or .jpg."


class UnsupportedFormat(FormatError):
    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"Unsupported image format: '{extension}'; expected png or jpg.")


# --- image codec / execution ---
class DecodeError(ImageApiError):
    message = "The file could not be decoded in the format given by its extension."


class EncodeError(ImageApiError):
    message = "The transformed image could not be encoded."


class EmptyImageResult(ImageApiError):
    message = "The requested operations produce an image with a zero dimension."


class OversizedImage(ImageApiError):
    message = "The image has more pixels than the service will process."
