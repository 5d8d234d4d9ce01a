"""
Models for stem cells, the pre-warmed containers kept per runtime kind.
"""
from typing import Any, Dict
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..errors import ManifestFormatError
from ..UTILS.byte_size import ByteSize


class StemCell(BaseModel):
    """
    A request to keep `count` idle containers of `memory` size ready.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    count: int = Field(gt=0)
    memory: ByteSize

    @field_validator('memory')
    @classmethod
    def _memory_positive(cls, memory: ByteSize) -> ByteSize:
        if memory.to_bytes <= 0:
            raise ValueError("memory must be positive")
        return memory

    @field_serializer('memory')
    def _memory_as_string(self, memory: ByteSize) -> str:
        return str(memory)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "StemCell":
        """
        Reads {"count": <int>, "memory": "<size>"}.

        :raises ByteSizeFormatError: If the memory string has no valid unit.
        :raises pydantic.ValidationError: If count or memory is not positive.
        """
        if not isinstance(data, dict) or 'count' not in data or 'memory' not in data:
            raise ManifestFormatError(f"Stem cell must have 'count' and 'memory', got {data!r}")
        memory = ByteSize.from_string(data['memory'])
        return cls(count=data['count'], memory=memory)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')
