"""Image transforms backed by Pillow."""

from entity_images.boundary.imaging.pipeline import DerivationPipeline, target_size

__all__ = ["DerivationPipeline", "target_size"]
