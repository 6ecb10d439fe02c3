"""Tests for extension and content type resolution."""
import pytest

from showcase.constants import collection_for
from showcase.utils.content_types import get_file_extension, resolve_content_type
from showcase.utils.slugify import slugify


@pytest.mark.parametrize(
    "filename, expected",
    [("Logo.PNG", "png"), ("archive.tar.gz", "gz"), ("README", ""), ("trailing.", "")],
)
def test_get_file_extension(filename, expected):
    assert get_file_extension(filename) == expected


@pytest.mark.parametrize(
    "extension, content_type, intent, expected",
    [
        ("png", "image/png", "image", ("png", "image/png")),
        (".JPG", None, "avatar", ("jpg", "image/jpeg")),
        ("webp", "  ", "banner-image", ("webp", "image/webp")),
        ("bin", None, "other", ("bin", "image/jpeg")),
        (None, None, "logo", ("", "image/jpeg")),
    ],
)
def test_resolve_content_type(extension, content_type, intent, expected):
    assert resolve_content_type(extension, content_type, intent) == expected


def test_collection_for():
    assert collection_for("team-member") == "team-members"
    with pytest.raises(ValueError):
        collection_for("admin")


def test_slugify():
    assert slugify("Brand & Web Design") == "brand-web-design"
    assert slugify("  Café Déjà Vu ") == "cafe-deja-vu"
