"""Data models for upload templates (manifests)."""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

UNSET = -1  # volume / group sentinel for "not specified"
NO_CHAPTER = "0"


class ChapterIdentifier(BaseModel):
    """Chapter number split into its primary and secondary parts.

    The secondary part is kept as a string so that "7.1" and "7.10" stay
    distinct; padding depends on the whole batch (see normalizer).
    """

    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str | None = None

    @classmethod
    def parse(cls, raw: str) -> "ChapterIdentifier":
        primary, sep, secondary = raw.partition(".")
        if not sep:
            return cls(primary=primary)
        # Only the first separator is significant
        return cls(primary=primary, secondary=secondary.split(".", 1)[0])

    @property
    def has_trailing_separator(self) -> bool:
        return self.secondary == ""

    def padded(self, width: int) -> "ChapterIdentifier":
        if not self.secondary:
            return ChapterIdentifier(primary=self.primary)
        return ChapterIdentifier(
            primary=self.primary, secondary=self.secondary.rjust(width, "0")
        )

    def __str__(self) -> str:
        if self.secondary:
            return f"{self.primary}.{self.secondary}"
        return self.primary


class ExtractedMetadata(BaseModel):
    """Fields pulled from a single filename."""

    volume: int = UNSET
    chapter_raw: str = NO_CHAPTER
    title: str = ""


class GroupDefaults(BaseModel):
    """Group and language ids stamped on every generated entry."""

    groups: tuple[int, int, int] = (UNSET, UNSET, UNSET)
    language: int = 1

    @classmethod
    def from_option(cls, value: str | None, language: int = 1) -> "GroupDefaults":
        """Parse a comma-separated group option ("657,12") into up to three ids.

        Raises:
            ValueError: If one of the ids is not an integer
        """
        groups = [UNSET, UNSET, UNSET]
        if value:
            parts = [p.strip() for p in str(value).split(",")]
            for i, part in enumerate(parts[:3]):
                if part:
                    groups[i] = int(part)
        return cls(groups=tuple(groups), language=language)


class ManifestEntry(BaseModel):
    """One row of an upload template.

    Serialized with the template's historical key names (group, group_2,
    group_3) so hand-edited templates keep working.
    """

    model_config = ConfigDict(populate_by_name=True)

    file: str
    title: str = ""
    volume: int = UNSET
    chapter: str = NO_CHAPTER
    group_primary: int = Field(default=UNSET, alias="group")
    group_secondary: int = Field(default=UNSET, alias="group_2")
    group_tertiary: int = Field(default=UNSET, alias="group_3")
    language: int = 1

    @field_validator("chapter", mode="before")
    @classmethod
    def _chapter_to_str(cls, value: object) -> object:
        # Hand-edited templates may carry numeric chapters
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("volume", mode="before")
    @classmethod
    def _blank_volume(cls, value: object) -> object:
        if value is None or value == "":
            return UNSET
        return value

    @property
    def groups(self) -> tuple[int, int, int]:
        return (self.group_primary, self.group_secondary, self.group_tertiary)

    @property
    def label(self) -> str:
        volume = self.volume if self.volume != UNSET else "-"
        return f"Vol. {volume} Ch. {self.chapter}"


Manifest = list[ManifestEntry]

manifest_adapter: TypeAdapter[list[ManifestEntry]] = TypeAdapter(list[ManifestEntry])
