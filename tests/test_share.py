import pytest

from memories_bed.core.share import (
    CODE_LENGTH, extract_code_from_url, generate_memory_code, generate_qr_png,
    is_valid_code, normalize_code_input, public_url,
)


def test_generated_codes_are_valid():
    for _ in range(50):
        code = generate_memory_code()
        assert len(code) == CODE_LENGTH
        assert is_valid_code(code)


@pytest.mark.parametrize("code", ["abc123", "ABC12", "ABC1234", "ABC-12", "", None])
def test_invalid_codes(code):
    assert not is_valid_code(code)


def test_public_url_strips_trailing_slash():
    assert public_url("ABC123", "https://memories.example/") == "https://memories.example/view/ABC123"
    assert public_url("ABC123") == "http://localhost:3000/view/ABC123"


def test_extract_code_from_url():
    assert extract_code_from_url("https://memories.example/view/abc123?x=1") == "ABC123"
    assert extract_code_from_url("https://memories.example/gallery/abc123") is None
    assert extract_code_from_url("https://memories.example/view/") is None


@pytest.mark.parametrize("text,expected", [
    ("  xy12z9 ", "XY12Z9"),
    ("http://localhost:3000/view/XY12Z9", "XY12Z9"),
    ("http://localhost:3000/view/XY12", None),
    ("nope", None),
    ("", None),
])
def test_normalize_code_input(text, expected):
    assert normalize_code_input(text) == expected


def test_qr_png():
    data = generate_qr_png(public_url("ABC123"))
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
