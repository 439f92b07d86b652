from pydantic import BaseModel, Field, field_validator

from skillswap.models.skill import SkillType


class SkillCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: SkillType

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("skill name cannot be blank")
        return name
