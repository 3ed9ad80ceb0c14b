"""Identifier generation and normalization."""

import uuid

import pytest

from layergen.kernel import generate_identifier, normalize_identifier


def test_generate_identifier_is_hex_without_separators():
    """Generated identifiers are 32 lowercase hex chars and unique."""
    a = generate_identifier()
    b = generate_identifier()
    assert len(a) == 32
    assert all(c in "0123456789abcdef" for c in a)
    assert a != b


def test_normalize_strips_separators():
    value = uuid.uuid4()
    assert normalize_identifier(str(value)) == value.hex
    assert normalize_identifier(str(value).upper()) == value.hex
    assert normalize_identifier(value.hex) == value.hex


def test_normalize_empty():
    assert normalize_identifier("") == ""
    assert normalize_identifier(None) == ""


def test_normalize_rejects_garbage():
    with pytest.raises(ValueError):
        normalize_identifier("not-a-guid")
