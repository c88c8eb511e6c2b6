from __future__ import annotations

import pytest

from tiktokdl.errors import EmptyInputError, InvalidFormatError
from tiktokdl.services.validator import validate_reference


@pytest.mark.parametrize(
    "url",
    [
        "https://vt.tiktok.com/ZSrJxqY5S/",
        "https://www.tiktok.com/@someone/video/7234567890123456789",
        "tiktok.com/x",
        "vt.tiktok.com/x",
        "see tiktok.com/abc for details",
    ],
)
def test_validate_reference_accepts_tiktok_links(url: str) -> None:
    assert validate_reference(url) is url


def test_validate_reference_does_not_trim_or_normalise() -> None:
    url = "  https://vt.tiktok.com/ZSrJxqY5S/  "

    assert validate_reference(url) == url


@pytest.mark.parametrize("value", [None, ""])
def test_validate_reference_rejects_empty_values(value) -> None:
    with pytest.raises(EmptyInputError):
        validate_reference(value)


@pytest.mark.parametrize(
    "value",
    [
        "https://example.com/foo",
        "https://tiktok.com",
        "https://tiktok.com/",
        "tiktok.com/\n",
        "https://tiktok.co/abc",
        12345,
    ],
)
def test_validate_reference_rejects_other_values(value) -> None:
    with pytest.raises(InvalidFormatError) as excinfo:
        validate_reference(value)

    assert "https://vt.tiktok.com/ZSrJxqY5S/" in excinfo.value.message
