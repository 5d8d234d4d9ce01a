"""
Models for runtime kinds and the families grouping their versions.
"""
from typing import Any, Dict, FrozenSet, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ManifestFormatError
from ..REGISTRY.image_name import ImageName
from .stem_cell import StemCell


class RuntimeManifest(BaseModel):
    """
    One concrete runtime version, e.g. kind 'nodejs:8' served by image 'nodejsaction'.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: str
    image: ImageName
    default: Optional[bool] = None
    deprecated: Optional[bool] = None
    require_main: Optional[bool] = Field(default=None, alias='requireMain')
    sentinelled_logs: Optional[bool] = Field(default=None, alias='sentinelledLogs')
    stem_cells: Optional[Tuple[StemCell, ...]] = Field(default=None, alias='stemCells')

    @property
    def is_default(self) -> bool:
        return bool(self.default)

    @property
    def is_deprecated(self) -> bool:
        return bool(self.deprecated)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RuntimeManifest":
        """
        Reads a manifest object. Stem cells are decoded with their own codec so
        that size strings report their format error unchanged.
        """
        if not isinstance(data, dict):
            raise ManifestFormatError(f"Runtime manifest must be an object, got {data!r}")
        if not isinstance(data.get('kind'), str):
            raise ManifestFormatError(f"Runtime manifest needs a 'kind', got {data!r}")
        if 'image' not in data:
            raise ManifestFormatError(f"Runtime manifest '{data['kind']}' needs an 'image'")

        fields = {k: v for k, v in data.items() if k not in ('image', 'stemCells')}
        stem_cells = data.get('stemCells')
        if stem_cells is not None:
            if not isinstance(stem_cells, list):
                raise ManifestFormatError(f"'stemCells' of '{data['kind']}' must be a list")
            fields['stemCells'] = tuple(StemCell.from_json(c) for c in stem_cells)

        return cls(image=ImageName.from_json(data['image']), **fields)

    def to_json(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={'image', 'stem_cells'})
        data['image'] = self.image.to_json()
        if self.stem_cells is not None:
            data['stemCells'] = [c.to_json() for c in self.stem_cells]
        return data


class RuntimeFamily(BaseModel):
    """
    The versions of one language runtime, listed under a shared alias (e.g. 'nodef').
    """
    model_config = ConfigDict(frozen=True)

    alias: str
    manifests: FrozenSet[RuntimeManifest] = frozenset()

    @field_validator('manifests')
    @classmethod
    def _unique_kinds(cls, manifests: FrozenSet[RuntimeManifest]) -> FrozenSet[RuntimeManifest]:
        kinds = [m.kind for m in manifests]
        if len(kinds) != len(set(kinds)):
            raise ValueError("each kind may appear only once in a family")
        return manifests

    @property
    def defaults(self) -> List[RuntimeManifest]:
        """Manifests explicitly flagged as default."""
        return [m for m in self.manifests if m.is_default]

    @property
    def default_manifest(self) -> Optional[RuntimeManifest]:
        """
        The manifest used for '<alias>:default'.

        The single flagged manifest, or the only manifest of the family when
        nothing is flagged. None when neither applies.
        """
        defaults = self.defaults
        if len(defaults) == 1:
            return defaults[0]
        if not defaults and len(self.manifests) == 1:
            return next(iter(self.manifests))
        return None
