"""JSON document codec for ledger values."""

from typing import Generic, TypeVar

from beartype import beartype
from pydantic import BaseModel, ValidationError

from ..core.errors import EntityError, ErrorCode
from ..core.result_types import Err, Ok, Result

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class DocumentCodec(Generic[DocumentT]):
    """Encode a document to UTF-8 JSON bytes with camelCase keys, and back."""

    def __init__(self, model: type[DocumentT]) -> None:
        self._model = model

    @property
    def model(self) -> type[DocumentT]:
        return self._model

    @beartype
    def encode(self, document: BaseModel) -> bytes:
        return document.model_dump_json(by_alias=True).encode("utf-8")

    @beartype
    def decode(self, raw: bytes) -> Result[DocumentT, EntityError]:
        """Parse stored bytes; malformed documents become DECODE_ERROR."""
        try:
            return Ok(self._model.model_validate_json(raw))
        except ValidationError as exc:
            detail = EntityError.from_validation_error(exc)
            return Err(
                EntityError(
                    ErrorCode.DECODE_ERROR,
                    f"Stored {self._model.__name__} document is malformed: "
                    f"{detail.message}",
                    detail.field,
                )
            )
