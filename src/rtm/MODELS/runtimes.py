"""
The resolved runtime manifest and the lookups run against it.
"""
from typing import Any, Dict, FrozenSet, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict

from ..REGISTRY.image_name import ImageName
from .runtime_manifest import RuntimeFamily, RuntimeManifest
from .stem_cell import StemCell

DEFAULT_SUFFIX = ":default"


class Runtimes(BaseModel):
    """
    All runtime families after overrides have been applied and invariants checked.
    Built once by the manifest resolver and only queried afterwards.
    """
    model_config = ConfigDict(frozen=True)

    families: FrozenSet[RuntimeFamily] = frozenset()
    blackbox_images: FrozenSet[ImageName] = frozenset()
    default_kind: Optional[str] = None

    # Pull bypass for images already present under the local prefix
    bypass_pull_for_local_images: bool = False
    local_image_prefix: Optional[str] = None

    @property
    def manifests(self) -> Dict[str, RuntimeManifest]:
        """Every manifest by kind."""
        return {m.kind: m for family in self.families for m in family.manifests}

    @property
    def known_container_runtimes(self) -> FrozenSet[str]:
        return frozenset(self.manifests)

    def family(self, alias: str) -> Optional[RuntimeFamily]:
        for family in self.families:
            if family.alias == alias:
                return family
        return None

    def resolve_default_runtime(self, ref: str) -> Optional[RuntimeManifest]:
        """
        Finds the manifest for a kind or for a family default.

        :param ref: A kind such as 'nodejs:8', or '<alias>:default'.
        :return: The manifest, or None if the kind or alias is unknown or the
                 family has no unambiguous default.
        """
        if ref.endswith(DEFAULT_SUFFIX):
            family = self.family(ref[:-len(DEFAULT_SUFFIX)])
            if family is not None:
                return family.default_manifest
        return self.manifests.get(ref)

    @property
    def default_runtime(self) -> Optional[RuntimeManifest]:
        """The platform-wide default, when one is configured."""
        if self.default_kind is None:
            return None
        return self.resolve_default_runtime(self.default_kind)

    def skip_docker_pull(self, image: ImageName) -> bool:
        """
        Whether an image can be used without pulling it from a registry.

        True for blackbox images and, when enabled, for images under the
        local image prefix.
        """
        if image in self.blackbox_images:
            return True
        return (self.bypass_pull_for_local_images
                and self.local_image_prefix is not None
                and image.prefix == self.local_image_prefix)

    @property
    def stemcells(self) -> List[Tuple[RuntimeManifest, StemCell]]:
        """Every (manifest, stem cell) pair across all families."""
        return [
            (manifest, cell)
            for family in self.families
            for manifest in family.manifests
            for cell in (manifest.stem_cells or ())
        ]

    def to_json(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Describes the available runtimes per family, as published to clients.
        """
        listing = {}
        for family in sorted(self.families, key=lambda f: f.alias):
            listing[family.alias] = [
                {
                    'kind': m.kind,
                    'image': m.image.public_image_name,
                    'default': m.is_default,
                    'deprecated': m.is_deprecated,
                    'requireMain': bool(m.require_main),
                }
                for m in sorted(family.manifests, key=lambda m: m.kind)
            ]
        return listing
