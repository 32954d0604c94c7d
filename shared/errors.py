"""
Exceptions shared by the deck services.
"""


class DeckError(Exception):
    """Base class for deck studio errors."""


class InputValidationError(DeckError):
    """Raised when a generation request carries neither a document nor notes."""


class GenerationInProgressError(DeckError):
    """Raised when a generation cycle is started while another one is running."""


class StructureGenerationError(DeckError):
    """Raised when the structure generator fails or returns an unusable outline."""


class ImageGenerationError(DeckError):
    """Raised when the image generator fails or returns an empty payload."""


class DocumentEncodingError(DeckError):
    """Raised when an uploaded document cannot be prepared for the generator."""


class SlideNotFoundError(DeckError):
    def __init__(self, slide_id: str):
        super().__init__(f"Slide '{slide_id}' not found")
        self.slide_id = slide_id


class ElementNotFoundError(DeckError):
    def __init__(self, slide_id: str, element_id: str):
        super().__init__(f"Element '{element_id}' not found on slide '{slide_id}'")
        self.slide_id = slide_id
        self.element_id = element_id


class NoPresentationError(DeckError):
    """Raised when an edit is attempted before any deck has been generated."""
