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
Runtime image names.
Parses and renders names like 'nodejsaction', 'openwhisk/python3action:1.0'
or 'pre1/pre2/img:t', and derives the names used against a local registry.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass

from ..errors import ImageNameFormatError, ManifestFormatError

COMPONENT_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz0123456789._-")
TAG_CHARS = COMPONENT_CHARS | frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
MAX_TAG_LENGTH = 128


def _is_component(value: str) -> bool:
    return bool(value) and all(c in COMPONENT_CHARS for c in value)


@dataclass(frozen=True)
class ImageName:
    """
    Name of a runtime image: ``[prefix/]name[:tag]``.

    The prefix may span several path segments (e.g. 'registry/namespace').
    An empty prefix or tag is rendered as if it were absent.

    Examples:
        - nodejsaction -> ImageName('nodejsaction')
        - p/i:t -> ImageName('i', prefix='p', tag='t')
        - pre1/pre2/img -> ImageName('img', prefix='pre1/pre2')
    """

    name: str
    prefix: Optional[str] = None
    tag: Optional[str] = None

    DEFAULT_TAG = "latest"

    def __post_init__(self):
        if not self.name:
            raise ImageNameFormatError("Image name must not be empty")
        if ":" in self.name or "/" in self.name:
            raise ImageNameFormatError(f"Invalid image name '{self.name}'")

    @classmethod
    def parse(cls, value: str) -> "ImageName":
        """
        Parse an image name string.

        The prefix is everything before the last '/', the final segment holds
        the name and at most one ':' separating the tag.

        Args:
            value: Image name string (e.g. 'img', 'pre/img:t')

        Returns:
            Parsed ImageName.
        """
        if not value:
            raise ImageNameFormatError("Empty image name")

        prefix = None
        last = value
        slash = value.rfind("/")
        if slash != -1:
            prefix, last = value[:slash], value[slash + 1 :]
            if not all(_is_component(part) for part in prefix.split("/")):
                raise ImageNameFormatError(f"could not parse image name '{value}'")

        tag = None
        if last.count(":") > 1:
            raise ImageNameFormatError(f"could not parse image name '{value}'")
        if ":" in last:
            last, tag = last.split(":")
            if not tag or len(tag) > MAX_TAG_LENGTH or not all(c in TAG_CHARS for c in tag):
                raise ImageNameFormatError(f"could not parse image name '{value}'")

        if not _is_component(last):
            raise ImageNameFormatError(f"could not parse image name '{value}'")

        return cls(name=last, prefix=prefix, tag=tag)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ImageName":
        """Build an image name from its JSON object form."""
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise ManifestFormatError(f"Image must be an object with a 'name', got {data!r}")

        prefix = data.get("prefix")
        tag = data.get("tag")
        for field, val in (("prefix", prefix), ("tag", tag)):
            if val is not None and not isinstance(val, str):
                raise ManifestFormatError(f"Image {field} must be a string, got {val!r}")

        return cls(name=data["name"], prefix=prefix, tag=tag)

    def to_json(self) -> Dict[str, str]:
        data = {"name": self.name}
        if self.prefix is not None:
            data["prefix"] = self.prefix
        if self.tag is not None:
            data["tag"] = self.tag
        return data

    def with_defaults(self, prefix: Optional[str] = None, tag: Optional[str] = None) -> "ImageName":
        """
        Fill in a missing prefix and tag.

        Values already set on the image, including empty strings, are kept.
        """
        return ImageName(
            name=self.name,
            prefix=self.prefix if self.prefix is not None else prefix,
            tag=self.tag if self.tag is not None else tag,
        )

    @property
    def public_image_name(self) -> str:
        """Get the image name as published: [prefix/]name[:tag]."""
        name = f"{self.prefix}/{self.name}" if self.prefix else self.name
        if self.tag:
            return f"{name}:{self.tag}"
        return name

    def local_image_name(self, registry: str, local_prefix: str, tag_override: Optional[str] = None) -> str:
        """
        Get the name used to reference the image in a local registry.

        Args:
            registry: Registry host, omitted when empty
            local_prefix: Namespace in the registry, omitted when empty
            tag_override: Tag to use instead of the image's own, even when empty

        Returns:
            [registry/][local_prefix/]name:tag, the tag defaulting to 'latest'.
            An empty tag is left out along with its colon.
        """
        if tag_override is not None:
            tag = tag_override
        else:
            tag = self.tag if self.tag is not None else self.DEFAULT_TAG
        parts = [p for p in (registry, local_prefix) if p]
        parts.append(f"{self.name}:{tag}" if tag else self.name)
        return "/".join(parts)

    def __str__(self) -> str:
        return self.public_image_name

    def __repr__(self) -> str:
        return f"ImageName({self.public_image_name})"
