"""
Word pair Pydantic schemas
Modelos dos pares de palavras
"""

from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

from impostor.schemas.room import WordCategory


class WordPairBase(BaseModel):
    crewmate_word: str = Field(..., min_length=1, max_length=50)
    impostor_word: str = Field(..., min_length=1, max_length=50)
    category: WordCategory

    @field_validator("crewmate_word", "impostor_word")
    @classmethod
    def normalize_word(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("A palavra não pode ser vazia")
        return v

    @field_validator("category")
    @classmethod
    def concrete_category(cls, v: WordCategory) -> WordCategory:
        if v == WordCategory.ALL:
            raise ValueError("'all' não é uma categoria de par")
        return v

    @model_validator(mode="after")
    def words_differ(self):
        if self.crewmate_word == self.impostor_word:
            raise ValueError("As palavras do par devem ser diferentes")
        return self


class WordPairCreate(WordPairBase):
    pass


class CategoryStats(BaseModel):
    category: WordCategory
    count: int


class CategoryListResponse(BaseModel):
    categories: List[CategoryStats]
    total: int
