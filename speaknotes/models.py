from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NotesModel(BaseModel):
    # Wire names are camelCase (keyPoints, rawSentenceCount); Python stays snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class KeywordEntry(NotesModel):
    word: str
    count: int = Field(ge=1)


class Definition(NotesModel):
    term: str
    definition: str


class NotesResult(NotesModel):
    topic: str
    summary: str
    key_points: List[str] = Field(default_factory=list)
    definitions: List[Definition] = Field(default_factory=list)
    keywords: List[KeywordEntry] = Field(default_factory=list)
    concepts: List[str] = Field(default_factory=list)
    exam_notes: List[str] = Field(default_factory=list)
    questions: List[str] = Field(default_factory=list)
    raw_sentence_count: int = 0

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True)
