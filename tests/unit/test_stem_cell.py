import pytest
from pydantic import ValidationError

from rtm.errors import ByteSizeFormatError, ManifestFormatError
from rtm.MODELS.stem_cell import StemCell
from rtm.UTILS.byte_size import ByteSize


def test_serialize():
    cell = StemCell(count=3, memory=ByteSize.mb(128))
    assert cell.to_json() == {"count": 3, "memory": "128 MB"}


def test_deserialize():
    cell = StemCell.from_json({"count": 3, "memory": "128 MB"})
    assert cell == StemCell(count=3, memory=ByteSize.mb(128))
    assert StemCell.from_json(cell.to_json()) == cell


@pytest.mark.parametrize("count", [0, -1])
def test_count_must_be_positive(count):
    with pytest.raises(ValidationError):
        StemCell(count=count, memory=ByteSize.mb(128))


def test_deserialize_checks_count():
    with pytest.raises(ValidationError):
        StemCell.from_json({"count": 0, "memory": "128 MB"})


def test_deserialize_rejects_size_without_unit():
    with pytest.raises(ByteSizeFormatError) as exc:
        StemCell.from_json({"count": 1, "memory": "128"})
    assert str(exc.value) == ByteSize.FORMAT_ERROR


def test_memory_must_be_positive():
    with pytest.raises(ValidationError):
        StemCell(count=1, memory=ByteSize.mb(0))


@pytest.mark.parametrize("data", [{"count": 1}, {"memory": "1 MB"}, [1, "1 MB"]])
def test_deserialize_missing_fields(data):
    with pytest.raises(ManifestFormatError):
        StemCell.from_json(data)


def test_frozen_and_hashable():
    cell = StemCell(count=2, memory=ByteSize.mb(256))
    with pytest.raises(ValidationError):
        cell.count = 3
    assert len({cell, StemCell(count=2, memory=ByteSize.mb(256))}) == 1
