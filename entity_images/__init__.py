"""
Entity images.

Declarative image attachments for persisted entities: configured
variants derived on upload, served under stable public URLs, with
optional per-locale images and access-gated blurred copies.
"""

__version__ = "0.1.0"
