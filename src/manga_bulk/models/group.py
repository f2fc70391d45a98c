"""Data models for the group cache."""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class GroupRecord(BaseModel):
    """A remote group as listed on the upload page."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    is_open: bool = Field(default=True, alias="open")


class GroupMatch(BaseModel):
    """A cached group scored against a search term."""

    group: GroupRecord
    score: float


group_list_adapter: TypeAdapter[list[GroupRecord]] = TypeAdapter(list[GroupRecord])
