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
Errors raised while reading and resolving a runtime manifest.
"""


class ManifestError(ValueError):
    """Base class for all manifest errors."""


class ManifestFormatError(ManifestError):
    """The manifest document or one of its values is malformed."""


class ImageNameFormatError(ManifestFormatError):
    """An image name string could not be parsed."""


class ByteSizeFormatError(ManifestFormatError):
    """A byte size string could not be parsed."""


class ManifestValidationError(ManifestError):
    """The manifest is well formed but violates a resolution invariant."""
