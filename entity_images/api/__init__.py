"""HTTP API: image serving routes and template helpers."""
