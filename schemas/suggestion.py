from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, constr


class GenerationKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    first_lang: str
    second_lang: str

    @property
    def token(self) -> str:
        return f"{self.user_id}_{self.first_lang}_{self.second_lang}"

    def __str__(self) -> str:
        return self.token


class CandidateSource(str, Enum):
    DEFAULTS = "defaults"
    USER_CONTEXT = "user_context"
    COLD_START = "cold_start"

    @property
    def uses_llm(self) -> bool:
        return self is not CandidateSource.DEFAULTS


class WordCandidate(BaseModel):
    word: constr(strip_whitespace=True)
    translation: constr(strip_whitespace=True) = ""


class GeneratedWords(BaseModel):
    words: list[WordCandidate] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class CandidateBatch(BaseModel):
    words: list[WordCandidate] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    source: CandidateSource


class GenerationReport(BaseModel):
    """Usage record of one LLM-backed generation run.

    Token counts are optional because not every completion response carries
    usage. Any further metadata returned by the client is kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    user_id: str
    first_lang: str
    second_lang: str
    words_added: int
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
    model: str | None = None

    @classmethod
    def from_metadata(cls, key: GenerationKey, metadata: dict[str, Any], words_added: int) -> "GenerationReport":
        return cls(
            **{
                **metadata,
                "words_added": words_added,
                "user_id": key.user_id,
                "first_lang": key.first_lang,
                "second_lang": key.second_lang,
            }
        )

    def details(self) -> dict[str, Any]:
        return dict(self.model_extra or {})
