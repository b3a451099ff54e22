from typing import Optional
from pydantic import BaseModel, Field

class InquiryCreate(BaseModel):
    message: str = Field(min_length=1, max_length=2000)

    class Config:
        str_strip_whitespace = True

class SubmissionResponse(BaseModel):
    success: bool = True
    message: str
    order_id: Optional[str] = None
