"""Pydantic schemas for upload requests and responses."""

from pydantic import BaseModel


class UploadRequestSchema(BaseModel):
    file_url: str


class UploadSuccessSchema(BaseModel):
    message: str = "File uploaded successfully"
    attachment_id: int
    url: str


class UploadErrorSchema(BaseModel):
    code: str
    message: str
