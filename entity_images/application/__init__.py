"""Application layer: use-case orchestration over the image core."""
