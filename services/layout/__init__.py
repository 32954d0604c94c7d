"""Layout hydration: semantic slides to free-form canvas elements."""

from .hydrator import hydrate, hydrate_presentation, hydrate_slide, refresh_image_elements

__all__ = ["hydrate", "hydrate_presentation", "hydrate_slide", "refresh_image_elements"]
