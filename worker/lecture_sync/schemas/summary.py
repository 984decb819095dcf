"""Study summary schema and normalization of raw model output."""
import json
import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lecture_sync.config import MAX_SUMMARY_CHARS
from lecture_sync.errors import InvalidSummaryShapeError, SchemaValidationError

SUMMARY_FALLBACK_KEYS = ("resumo", "content", "text")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class SummaryResult(BaseModel):
    """Structured summary of one lecture."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=10, max_length=150)
    summary: str = Field(min_length=500, max_length=MAX_SUMMARY_CHARS)
    discipline: Optional[str] = None
    lecture_number: Optional[int] = Field(default=None, alias="lectureNumber")
    theme: Optional[str] = None

    @field_validator("lecture_number", mode="before")
    @classmethod
    def coerce_lecture_number(cls, value: Any) -> Optional[int]:
        """Accept a number or numeric string; anything unparseable becomes None."""
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValueError("lectureNumber must be a number or a string")
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        if isinstance(value, str):
            match = _LEADING_INT.match(value)
            return int(match.group(1)) if match else None
        raise ValueError("lectureNumber must be a number or a string")


# Prompt template for lecture summaries
PROMPT = """Você é um professor universitário especializado em ensinar tecnologia. Seu aluno usará este material para estudar para uma prova.

Responda com um objeto JSON contendo exatamente os campos "title", "summary", "discipline", "lectureNumber" e "theme".

O campo "summary" deve ser um único texto, em português do Brasil, seguindo exatamente esta estrutura narrativa:

> **Introdução**
> Defina o tema central da aula, apresente os principais tópicos e por que eles importam na disciplina.

> **Contexto**: 1 a 2 frases sobre a relevância acadêmica e profissional do tema.

> **Conceitos-chave**: os conceitos explicados em frases completas, não apenas títulos.

> **Exemplos práticos**: dois exemplos concretos, um teórico (fórmula, pseudocódigo) e um aplicado (caso real).

> **Aplicação**: como o conteúdo é usado no mercado ou em projetos reais.

> **Erro comum**: um equívoco frequente dos alunos e sua correção.

> **Resumo final**: reafirme o valor central da aula e o ponto crítico para aplicar os conceitos corretamente.

Use EXCLUSIVAMENTE o texto fornecido. Não invente exemplos que não possam ser inferidos do conteúdo. Use a terminologia técnica correta.

"title" deve ter entre 10 e 150 caracteres. "discipline" e "theme" podem ser null se não forem identificáveis. "lectureNumber" é o número da aula, ou null.

**Texto da aula**:
{text}"""


# =============================================================================
# Field normalization
# =============================================================================


@dataclass(frozen=True)
class TextField:
    value: str


@dataclass(frozen=True)
class ArrayField:
    items: list


@dataclass(frozen=True)
class ObjectField:
    value: dict


@dataclass(frozen=True)
class ScalarField:
    value: Any


@dataclass(frozen=True)
class MissingField:
    pass


ParsedField = Union[TextField, ArrayField, ObjectField, ScalarField, MissingField]


def classify_field(value: Any) -> ParsedField:
    """Classify a raw JSON value into one of the supported field shapes.

    ``None`` and the empty string count as missing.
    """
    if value is None or value == "":
        return MissingField()
    if isinstance(value, str):
        return TextField(value)
    if isinstance(value, list):
        return ArrayField(value)
    if isinstance(value, dict):
        return ObjectField(value)
    return ScalarField(value)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def field_to_text(field: ParsedField) -> Any:
    """Resolve a classified field to text.

    Returns an empty string for missing fields and the raw value for
    scalars, which callers reject.
    """
    if isinstance(field, TextField):
        return field.value
    if isinstance(field, ArrayField):
        return "\n\n".join(_stringify(item) for item in field.items)
    if isinstance(field, ObjectField):
        inner = field.value.get("text") or field.value.get("content")
        if inner:
            return _stringify(inner)
        return json.dumps(field.value, ensure_ascii=False)
    if isinstance(field, ScalarField):
        return field.value
    return ""


def normalize_summary_field(data: dict) -> dict:
    """Return a copy of ``data`` whose ``summary`` is a non-empty string.

    Raises:
        InvalidSummaryShapeError: If no usable summary text can be found
    """
    summary = field_to_text(classify_field(data.get("summary")))

    if summary == "":
        for key in SUMMARY_FALLBACK_KEYS:
            candidate = data.get(key)
            if candidate:
                summary = candidate
                break

    if not isinstance(summary, str) or not summary:
        raise InvalidSummaryShapeError(
            f"Model returned summary in an invalid format: {type(summary).__name__}",
            {"keys": sorted(data.keys())},
        )

    normalized = dict(data)
    normalized["summary"] = summary
    return normalized


def truncate_summary(summary: str, limit: int = MAX_SUMMARY_CHARS) -> str:
    """Cut ``summary`` to ``limit`` characters, ending in an ellipsis."""
    if len(summary) <= limit:
        return summary
    return summary[: limit - 3] + "..."


def validate_summary(data: dict) -> SummaryResult:
    """Validate normalized model output.

    Raises:
        SchemaValidationError: Listing every field that failed validation
    """
    try:
        return SummaryResult.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        fields = []
        for error in errors:
            name = ".".join(str(part) for part in error["loc"]) or "__root__"
            if name not in fields:
                fields.append(name)
        raise SchemaValidationError(fields, errors) from e
