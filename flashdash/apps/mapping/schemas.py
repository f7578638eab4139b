"""
User mapping schemas. Keys follow the front end's camelCase.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class MappingSet(BaseModel):
    forthUserId: str = Field(..., min_length=1)
    flashUserId: str = Field(..., min_length=1)
    forthUserName: Optional[str] = None
    flashUserName: Optional[str] = None


class MappingDelete(BaseModel):
    forthUserId: str = Field(..., min_length=1)


class MappingResponse(BaseModel):
    forthUserId: str = Field(validation_alias="forth_user_id")
    flashUserId: str = Field(validation_alias="flash_user_id")
    forthUser: Optional[str] = Field(None, validation_alias="forth_user_name")
    flashUser: Optional[str] = Field(None, validation_alias="flash_user_name")

    model_config = ConfigDict(from_attributes=True)
