"""
Image ORM model for entity images.

Stores the record behind one attached image: the id used as on-disk
filename stem, the alt text and the encoded entity path linking the
record back to the schema, owning entity and locale that produced it.

Dependencies: sqlalchemy, entity_images.boundary.db.base
System role: Image record persistence
"""

import base64
import uuid as uuid_lib
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from entity_images.boundary.db.base import Base


def encode_image_id(value: uuid_lib.UUID) -> str:
    """
    Encode a UUID as a filename-safe image id.

    Returns:
        str: 22 characters from [A-Za-z0-9_-]
    """
    return base64.urlsafe_b64encode(value.bytes).rstrip(b"=").decode("ascii")


class ImageModel(Base):
    """
    Image record ORM model.

    Attributes:
        id: Filename stem of derived files (encoded uuid unless set explicitly)
        uuid: Random 128-bit value the default id is derived from
        alt: Alternative text for <img> tags
        entity_path: Encoded "slug:identity[:locale]" of the owner
        created_at: Modification time of the written original file
        updated_at: Status change time of the written original file
    """

    __tablename__ = "images"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    uuid: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid,
        nullable=False,
        doc="Random value the default id is derived from",
    )

    alt: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default="",
        doc="Alternative text",
    )

    entity_path: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        index=True,
        doc="Encoded owner path (slug:identity[:locale])",
    )

    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("uuid", uuid_lib.uuid4())
        kwargs.setdefault("id", encode_image_id(kwargs["uuid"]))
        kwargs.setdefault("alt", "")
        kwargs.setdefault("entity_path", "")
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<ImageModel id={self.id!r} entity_path={self.entity_path!r}>"
