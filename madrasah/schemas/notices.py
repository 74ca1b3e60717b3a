"""
Pydantic schemas for notices and documents.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from madrasah.core.enums import DocumentCategory, NoticePriority
from madrasah.schemas.common import blank_to_none, iso_date


class NoticeForm(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    priority: NoticePriority = NoticePriority.NORMAL
    publish_date: str = Field(min_length=1)
    expire_date: Optional[str] = None
    attachment_url: Optional[str] = Field(None, max_length=500)

    _dates = field_validator("publish_date", "expire_date")(iso_date)

    @model_validator(mode="after")
    def _expires_after_publish(self):
        if self.expire_date and self.expire_date < self.publish_date:
            raise PydanticCustomError("expire_date", "মেয়াদ শেষের তারিখ প্রকাশের তারিখের পরে হতে হবে")
        return self

    def to_record(self) -> dict:
        return {
            "title": self.title,
            "content": self.content,
            "priority": self.priority.value,
            "publish_date": self.publish_date,
            "expire_date": blank_to_none(self.expire_date),
            "attachment_url": blank_to_none(self.attachment_url),
            "is_active": True,
        }


class DocumentForm(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    category: DocumentCategory
    description: Optional[str] = None

    def to_record(self, file_url: str, file_size: int, file_type: Optional[str]) -> dict:
        return {
            "title": self.title,
            "category": self.category.value,
            "description": blank_to_none(self.description),
            "file_url": file_url,
            "file_size": file_size,
            "file_type": file_type,
        }
