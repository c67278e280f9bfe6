"""
Image rule configuration.

Declares the upload location and the list of rules binding an owning
entity type and field to a slug and a catalogue of derived file variants.

Rules can be given inline (``IMAGES_RULES`` as JSON) or in a JSON file
(``IMAGES_RULES_FILE``); file rules are appended after inline ones so
registration order stays predictable.

Dependencies: pydantic, pydantic_settings
System role: Declarative configuration for the schema registry
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic_settings import SettingsConfigDict

from entity_images.configs.base import BaseSettings


class FileConfig(BaseModel):
    """One configured file variant."""

    format: str | None = Field(default="png", description="Target image format")
    width: int | None = Field(default=None, description="Target width in pixels")
    height: int | None = Field(default=None, description="Target height in pixels")


class RuleConfig(BaseModel):
    """One configured image rule."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    owner: Any = Field(
        alias="class",
        description="Owning entity type, as a class or a dotted import path",
    )
    field: str = Field(description="Attribute on the entity (or its translation) holding the image")
    slug: str = Field(description="Short name used in public URLs and entity paths")
    translatable: bool = Field(default=False, description="Store one image per locale")
    save_original: bool = Field(default=True, description="Inject the implicit 'original' variant")
    use_slug: bool = Field(default=False, description="Identify entities by their 'slug' field")
    use_voter: bool = Field(default=False, description="Gate access through the authorization oracle")
    files: dict[str, FileConfig] = Field(default_factory=dict, description="Variant catalogue")


_rules_adapter = TypeAdapter(list[RuleConfig])


class ImageSettings(BaseSettings):
    """Upload location and image rules."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMAGES_",
        case_sensitive=False,
        extra="ignore",
    )

    path: str = Field(default="/upload", description="Upload directory, web-relative")
    project_dir: Path = Field(default_factory=Path.cwd, description="Project root directory")
    public_dir: str = Field(default="public", description="Web root, relative to project_dir")
    default_locale: str = Field(default="en", description="Locale used when none is active")
    rules: list[RuleConfig] = Field(default_factory=list, description="Inline image rules")
    rules_file: Path | None = Field(default=None, description="JSON file with additional rules")

    @property
    def upload_path(self) -> str:
        """Upload directory as a rooted web path."""
        return "/" + self.path.lstrip("/")

    @property
    def public_root(self) -> str:
        """Absolute path of the web root on disk."""
        return str(Path(self.project_dir) / self.public_dir)

    def load_rules(self) -> list[RuleConfig]:
        """
        Collect inline rules followed by the rules from ``rules_file``.

        Returns:
            list[RuleConfig]: Rules in registration order
        """
        rules = list(self.rules)
        if self.rules_file is not None:
            data = json.loads(Path(self.rules_file).read_text(encoding="utf-8"))
            rules.extend(_rules_adapter.validate_python(data))
        return rules
