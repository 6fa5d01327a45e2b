"""Subset of Quizlet's ``studiable-item-documents`` payload that we read."""

from dataclasses import dataclass
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

WORD_LABEL = "word"
DEFINITION_LABEL = "definition"


@dataclass(frozen=True)
class QuizletCard:
    front: str
    back: str


class _QuizletModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info):
        # Quizlet sends explicit nulls for absent media text and lists
        if value is None:
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return value


class Media(_QuizletModel):
    plain_text: str = Field(default="", alias="plainText")


class CardSide(_QuizletModel):
    label: str = ""
    media: List[Media] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Plain text of the first media entry, empty when there is none."""
        return self.media[0].plain_text if self.media else ""


class StudiableItem(_QuizletModel):
    id: int = 0
    card_sides: List[CardSide] = Field(default_factory=list, alias="cardSides")

    def first_side_text(self, label: str) -> str:
        for side in self.card_sides:
            if side.label == label and side.media:
                return side.text
        return ""

    def to_card(self) -> QuizletCard:
        return QuizletCard(
            front=self.first_side_text(WORD_LABEL),
            back=self.first_side_text(DEFINITION_LABEL),
        )


class StudiableModels(_QuizletModel):
    studiable_item: List[StudiableItem] = Field(default_factory=list, alias="studiableItem")


class StudiableResponse(_QuizletModel):
    models: StudiableModels = Field(default_factory=StudiableModels)


class StudiableItemsResponse(_QuizletModel):
    responses: List[StudiableResponse] = Field(default_factory=list)
