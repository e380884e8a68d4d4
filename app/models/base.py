"""
app/models/base.py

Purpose: Document parsing at the storage boundary

- Every document read from a collection is parsed into a typed model
- Stored field names are kept as aliases
- Malformed documents raise DocumentParseError (single reads) or are
  skipped with a warning (collection reads)
"""

from typing import Any, Iterable, List, Type, TypeVar

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import DocumentParseError
from app.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound="StoredDocument")


class StoredDocument(BaseModel):
    """Base for documents owned by the document store."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # Stored nulls fall back to field defaults
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, ObjectId) else v

    @classmethod
    def from_document(cls: Type[T], document: dict) -> T:
        """
        Parses one stored document.

        Raises:
            DocumentParseError: If the document does not match the model
        """
        try:
            return cls.model_validate(document)
        except PydanticValidationError as e:
            raise DocumentParseError(
                f"Malformed {cls.__name__} document",
                details={
                    "id": str(document.get("_id")) if isinstance(document, dict) else None,
                    "fields": [".".join(str(part) for part in err["loc"]) for err in e.errors()],
                },
            ) from e

    def to_api(self) -> dict:
        """JSON-ready representation using the stored field names."""
        return jsonable_encoder(
            self.model_dump(by_alias=True),
            custom_encoder={ObjectId: str},
        )


def parse_documents(model: Type[T], documents: Iterable[dict]) -> List[T]:
    """
    Parses a batch of stored documents, skipping malformed ones.

    Args:
        model: Target model class
        documents: Raw documents from a collection read

    Returns:
        Parsed models, in input order
    """
    parsed = []
    for document in documents:
        try:
            parsed.append(model.from_document(document))
        except DocumentParseError as e:
            logger.warning(
                f"Skipping malformed {model.__name__} document",
                extra={"details": e.details}
            )
    return parsed
