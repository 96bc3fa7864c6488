"""
Pydantic configuration schema for iskill.

Files on disk use camelCase keys (``defaultPath``, ``installMethod``);
attributes are snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from iskill.skills.models import InstallMethod
from iskill.storage.paths import DEFAULT_SKILLS_PATH


class Config(BaseModel):
    """Merged iskill configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    default_path: str = Field(
        default=DEFAULT_SKILLS_PATH,
        description="Install target used when no --path is given",
    )
    paths: list[str] = Field(default_factory=list, description="Additional skill paths")
    install_method: InstallMethod = Field(
        default=InstallMethod.SYMLINK,
        description="Install method used when no --method is given",
    )
    auto_update: bool = Field(default=False, description="Update skills that check reports as behind")
    telemetry: bool = True

    def to_file_dict(self) -> dict:
        """Serialize with on-disk (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def field_aliases(cls) -> dict[str, str]:
        """Map snake_case field names to their on-disk keys."""
        return {name: field.alias or name for name, field in cls.model_fields.items()}
