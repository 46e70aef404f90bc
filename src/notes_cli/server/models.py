from pydantic import BaseModel, Field
from typing import Optional

class CreateNoteRequest(BaseModel):
    title: str = Field(..., min_length=1)
    content: str
    summary: Optional[str] = None

class UpdateNoteRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    summary: Optional[str] = None

class NoteDTO(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    summary: Optional[str] = None
    created_at: str
    updated_at: str

class SummarizeRequest(BaseModel):
    text: str
    max_sentences: int = 2

class SummarizeResponse(BaseModel):
    summary: str

def note_dto(r) -> NoteDTO:
    return NoteDTO(
        id=r["id"], user_id=r["user_id"], title=r["title"], content=r["content"],
        summary=r["summary"], created_at=r["created_at"], updated_at=r["updated_at"],
    )
