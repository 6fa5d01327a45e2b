from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, Tuple

MODULE_NAME_MAX_LENGTH = 100


class _StrippedModel(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class AuthRequest(_StrippedModel):
    login: str = Field(min_length=1)
    password: str = Field(min_length=1)


class CreateOrUpdateModuleRequest(_StrippedModel):
    name: str = Field(min_length=1, max_length=MODULE_NAME_MAX_LENGTH)


class QuizletImportRequest(_StrippedModel):
    module_name: str = Field(min_length=1, max_length=MODULE_NAME_MAX_LENGTH)
    quizlet_module_id: str = Field(min_length=1)


class CreateCardRequest(_StrippedModel):
    term: str = Field(min_length=1)
    meaning: str = Field(min_length=1)


class UpdateCardRequest(_StrippedModel):
    term: Optional[str] = None
    meaning: Optional[str] = None

    @model_validator(mode="after")
    def _require_one_field(self):
        if not self.term and not self.meaning:
            raise ValueError("term or meaning is required")
        return self


# ---------------------------------------------------------------------------
# Import write envelope (never persisted as such)
# ---------------------------------------------------------------------------

class ModuleDraft(BaseModel):
    """Module skeleton: name + owner, uuid is assigned by storage."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=MODULE_NAME_MAX_LENGTH)
    user_uuid: str


class CardDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    term: str
    meaning: str

    @field_validator("term", "meaning")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ModuleWithCards(BaseModel):
    """A module and its ordered cards, written in one transaction."""

    model_config = ConfigDict(frozen=True)

    module: ModuleDraft
    cards: Tuple[CardDraft, ...] = ()
