"""Tests for card filename encoding and decoding."""

import pytest

from src.pipeline.card_renderer.filenames import (
    CardFilename,
    decode_card_filename,
    encode_card_filename,
    is_card_filename,
    sanitize_category,
)


def test_encode_with_and_without_category():
    assert (
        encode_card_filename("1", "promocao", "A", include_category=True)
        == "1_PROMOCAO_A.pdf"
    )
    assert encode_card_filename("3", "queda", "B", include_category=False) == "3_QUEDA.pdf"


def test_encode_unknown_type_raises():
    with pytest.raises(ValueError):
        encode_card_filename("1", "flyer", "A", include_category=True)


def test_category_with_underscores_round_trips():
    name = encode_card_filename("12", "bc", "Bebidas geladas", include_category=True)
    assert name == "12_BC_BEBIDAS_GELADAS.pdf"
    assert decode_card_filename(name, include_category=True) == CardFilename(
        "12", "bc", "BEBIDAS_GELADAS"
    )


def test_decode_without_category_uses_default():
    decoded = decode_card_filename("5_CUPOM.pdf", include_category=False)
    assert decoded == CardFilename("5", "cupom", "UNCATEGORIZED")


@pytest.mark.parametrize(
    "name",
    ["journal.pdf", "2024-01-01_10-00-00.zip", "1_PROMOCAO_A.pdf.part", "x_FLYER_A.pdf"],
)
def test_non_card_names(name):
    assert not is_card_filename(name, include_category=True)


def test_sanitize_category_empty_falls_back():
    assert sanitize_category("  !!  ") == "UNCATEGORIZED"
