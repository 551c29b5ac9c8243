from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: Optional[str] = Field(None, alias="roomId")


class JoinPayload(EventPayload):
    user_name: Optional[str] = Field(None, alias="userName")


class CodeChangePayload(EventPayload):
    code: str


class FileChangePayload(EventPayload):
    path: str
    content: str


class TypingPayload(EventPayload):
    user_name: Optional[str] = Field(None, alias="userName")


class LanguageChangePayload(EventPayload):
    language: str


class CompileCodePayload(EventPayload):
    code: str
    language: str
    version: str
    input: Optional[str] = None
