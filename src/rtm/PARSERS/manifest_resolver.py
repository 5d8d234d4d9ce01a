# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Resolver turning a runtime manifest document into the Runtimes model.
"""
import json
import logging
import yaml
from typing import Dict, Any, FrozenSet, List, Optional
from pydantic import ValidationError

from ..errors import ManifestFormatError, ManifestValidationError
from ..MODELS.manifest_config import RuntimeManifestConfig
from ..MODELS.runtime_manifest import RuntimeFamily, RuntimeManifest
from ..MODELS.runtimes import Runtimes
from ..REGISTRY.image_name import ImageName

logger = logging.getLogger(__name__)


class ManifestResolver:
    """
    Resolver for runtime manifest documents.
    """
    def __init__(self, config: Optional[RuntimeManifestConfig] = None):
        """
        Initializes the resolver with the overrides to apply.

        :param config: Image naming and pull overrides. Defaults to no overrides.
        """
        self.config = config or RuntimeManifestConfig()

    def parse(self, manifest_path: str) -> Runtimes:
        """
        Resolves a manifest file from a path.

        :param manifest_path: Path to the manifest file (JSON or YAML).
        :return: Resolved runtimes.
        """
        with open(manifest_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> Runtimes:
        """
        Resolves a manifest from a string.

        :param content: JSON (or YAML) content of the manifest.
        :return: Resolved runtimes.
        """
        if not content.strip():
            return self.resolve({})
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise ManifestFormatError(f"Manifest is not valid JSON or YAML: {e}") from e
        return self.resolve({} if data is None else data)

    def resolve(self, data: Dict[str, Any]) -> Runtimes:
        """
        Builds the runtimes model from a decoded manifest document.

        Every image gets the configured default prefix and tag where it has
        none. Nothing is returned unless the whole document is valid.

        :param data: Document with optional 'runtimes' and 'blackboxes' keys.
        :return: Resolved runtimes.
        :raises ManifestFormatError: If the document or a value in it is malformed.
        :raises ManifestValidationError: If a family has several defaults, a stem
                                         cell is invalid or the default kind is unknown.
        """
        if not isinstance(data, dict):
            raise ManifestFormatError(f"Manifest must be an object, got {type(data).__name__}")

        runtimes = data.get('runtimes')
        if runtimes is None:
            runtimes = {}
        if not isinstance(runtimes, dict):
            raise ManifestFormatError("'runtimes' must map family aliases to lists of manifests")

        try:
            families = frozenset(self._parse_family(alias, spec) for alias, spec in runtimes.items())
            blackboxes = self._parse_blackboxes(data.get('blackboxes', []))
        except ValidationError as e:
            raise ManifestValidationError(str(e)) from e

        for family in families:
            self._validate_family(family)

        default_kind = self.config.default_kind
        if default_kind is not None:
            kinds = {m.kind for family in families for m in family.manifests}
            if default_kind not in kinds:
                raise ManifestValidationError(f"Default kind '{default_kind}' is not a known runtime")

        logger.debug("Resolved %d runtime families and %d blackbox images", len(families), len(blackboxes))
        return Runtimes(
            families=families,
            blackbox_images=blackboxes,
            default_kind=default_kind,
            bypass_pull_for_local_images=self.config.bypass_pull_for_local_images,
            local_image_prefix=self.config.local_image_prefix,
        )

    def _parse_family(self, alias: str, spec: Any) -> RuntimeFamily:
        """
        Parses the manifests listed under one family alias.

        :param alias: The family alias.
        :param spec: The list of manifest objects.
        :return: A RuntimeFamily instance.
        """
        if not isinstance(spec, list):
            raise ManifestFormatError(f"Family '{alias}' must be a list of manifests")

        manifests: Dict[str, RuntimeManifest] = {}
        for m in spec:
            manifest = RuntimeManifest.from_json(m)
            manifest = manifest.model_copy(update={'image': self._apply_overrides(manifest.image)})
            seen = manifests.setdefault(manifest.kind, manifest)
            if seen != manifest:
                raise ManifestValidationError(
                    f"Family '{alias}' lists kind '{manifest.kind}' more than once with different settings")
        return RuntimeFamily(alias=alias, manifests=frozenset(manifests.values()))

    def _parse_blackboxes(self, spec: Any) -> FrozenSet[ImageName]:
        if spec is None:
            return frozenset()
        if not isinstance(spec, list):
            raise ManifestFormatError("'blackboxes' must be a list of images")
        return frozenset(self._apply_overrides(ImageName.from_json(i)) for i in spec)

    def _apply_overrides(self, image: ImageName) -> ImageName:
        return image.with_defaults(self.config.default_image_prefix, self.config.default_image_tag)

    def _validate_family(self, family: RuntimeFamily) -> None:
        """
        Rejects a family with more than one default manifest.

        :param family: The family to check.
        :raises ManifestValidationError: If the default is ambiguous.
        """
        defaults: List[str] = sorted(m.kind for m in family.defaults)
        if len(defaults) > 1:
            raise ManifestValidationError(
                f"Family '{family.alias}' has multiple default runtimes: {', '.join(defaults)}")
        if defaults and family.defaults[0].is_deprecated:
            logger.warning("Default runtime '%s' of family '%s' is deprecated", defaults[0], family.alias)


def resolve(data: Dict[str, Any], config: Optional[RuntimeManifestConfig] = None) -> Runtimes:
    """
    Resolves a decoded manifest document with the given overrides.
    """
    return ManifestResolver(config).resolve(data)
