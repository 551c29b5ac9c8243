from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PathRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # optional so that a missing field is a 400 from the handler, not a 422
    room_id: Optional[str] = Field(None, alias="roomId")
    path: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


class FileContentResponse(BaseModel):
    content: str
