import random
import string
import pytest
from rtm.errors import ByteSizeFormatError, ImageNameFormatError, ManifestError
from rtm.PARSERS.manifest_resolver import ManifestResolver
from rtm.REGISTRY.image_name import ImageName
from rtm.UTILS.byte_size import ByteSize

def random_string(length, alphabet=string.printable):
    return ''.join(random.choice(alphabet) for _ in range(length))

def test_fuzz_image_name_parser():
    alphabet = string.ascii_letters + string.digits + '/:._-@ '
    for _ in range(500):
        value = random_string(random.randint(0, 40), alphabet)
        try:
            image = ImageName.parse(value)
        except ImageNameFormatError:
            continue
        # Anything accepted renders back to the same string
        assert str(image) == value

def test_fuzz_byte_size_parser():
    for _ in range(500):
        value = random_string(random.randint(0, 12), string.digits + 'kmgbKMGB .-')
        try:
            size = ByteSize.from_string(value)
        except ByteSizeFormatError:
            continue
        assert ByteSize.from_string(str(size)) == size

def test_fuzz_manifest_resolver():
    resolver = ManifestResolver()
    for _ in range(100):
        content = random_string(random.randint(0, 500))
        try:
            resolver.parse_from_string(content)
        except ManifestError:
            pass

def test_edge_cases_parsers():
    resolver = ManifestResolver()

    # Empty string
    assert resolver.parse_from_string("").families == frozenset()

    # Only whitespace
    assert resolver.parse_from_string("   \n\t  ").families == frozenset()

    # Very long name
    assert ImageName.parse("a" * 10000).name == "a" * 10000

    # Deep prefix
    assert ImageName.parse("p/" * 100 + "i").prefix == "/".join(["p"] * 100)

    with pytest.raises(ByteSizeFormatError):
        ByteSize.from_string(" " * 100)
