from pydantic import BaseModel, ConfigDict


class EventImageRecord(BaseModel):
    file_name: str
    url: str


class DeleteEventRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    imageUrl: str | None = None


class UploadResult(BaseModel):
    message: str
    imageUrl: str


class MessageResult(BaseModel):
    message: str


class ErrorResult(BaseModel):
    error: str
    details: str | None = None
