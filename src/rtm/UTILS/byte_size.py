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
Byte sizes such as '128 MB' used for container memory limits.
"""
from dataclasses import dataclass
from functools import total_ordering

from ..errors import ByteSizeFormatError

# Binary multiples, largest first so the longest suffix wins
UNITS = {
    "GB": 1024 ** 3,
    "MB": 1024 ** 2,
    "KB": 1024,
    "B": 1,
}

SHORT_UNITS = {"G": "GB", "M": "MB", "K": "KB"}


@total_ordering
@dataclass(frozen=True, eq=False)
class ByteSize:
    """
    A size with the unit it was written in.

    Sizes compare by their byte count, so ``ByteSize(1, "MB") == ByteSize(1024, "KB")``.
    """

    size: int
    unit: str = "B"

    FORMAT_ERROR = 'Size Unit not supported. Only "B", "K[B]", "M[B]" and "G[B]" are supported.'

    def __post_init__(self):
        if self.unit not in UNITS:
            raise ByteSizeFormatError(self.FORMAT_ERROR)
        if self.size < 0:
            raise ValueError("a negative size of an object is not allowed.")

    @classmethod
    def b(cls, size: int) -> "ByteSize":
        return cls(size, "B")

    @classmethod
    def kb(cls, size: int) -> "ByteSize":
        return cls(size, "KB")

    @classmethod
    def mb(cls, size: int) -> "ByteSize":
        return cls(size, "MB")

    @classmethod
    def gb(cls, size: int) -> "ByteSize":
        return cls(size, "GB")

    @classmethod
    def from_string(cls, value: str) -> "ByteSize":
        """
        Parse a size string.

        Accepts an integer followed by a unit, optionally separated by whitespace,
        e.g. '128 MB', '256m', '1G'. Units are case-insensitive and the trailing
        'B' of KB/MB/GB may be omitted. A bare number is rejected.

        Args:
            value: The size string.

        Returns:
            Parsed ByteSize keeping the canonical unit.
        """
        if not isinstance(value, str):
            raise ByteSizeFormatError(cls.FORMAT_ERROR)

        text = value.strip().upper()
        digits = 0
        while digits < len(text) and text[digits] in "0123456789":
            digits += 1

        number, unit = text[:digits], text[digits:].strip()
        if not number or not unit:
            raise ByteSizeFormatError(cls.FORMAT_ERROR)

        unit = SHORT_UNITS.get(unit, unit)
        if unit not in UNITS:
            raise ByteSizeFormatError(cls.FORMAT_ERROR)

        return cls(int(number), unit)

    @property
    def to_bytes(self) -> int:
        return self.size * UNITS[self.unit]

    def __eq__(self, other):
        if not isinstance(other, ByteSize):
            return NotImplemented
        return self.to_bytes == other.to_bytes

    def __lt__(self, other):
        if not isinstance(other, ByteSize):
            return NotImplemented
        return self.to_bytes < other.to_bytes

    def __hash__(self):
        return hash(self.to_bytes)

    def __str__(self) -> str:
        return f"{self.size} {self.unit}"

    def __repr__(self) -> str:
        return f"ByteSize({self})"
