from pydantic import BaseModel, Field


class GroupBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    size: int = Field(ge=1, le=1000)
    specialty: str = Field(min_length=1, max_length=200)
    year: int = Field(default=1, ge=1, le=5)


class GroupCreate(GroupBase):
    pass


class GroupUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    size: int | None = Field(default=None, ge=1, le=1000)
    specialty: str | None = Field(default=None, min_length=1, max_length=200)
    year: int | None = Field(default=None, ge=1, le=5)


class GroupOut(GroupBase):
    id: str

    model_config = {"from_attributes": True}
