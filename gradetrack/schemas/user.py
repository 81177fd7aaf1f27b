from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["student", "instructor"]


class Identity(BaseModel):
    id: str = Field(min_length=1)
    role: Role
    name: str = ""
