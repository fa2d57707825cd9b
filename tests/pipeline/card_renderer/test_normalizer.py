"""Tests for row normalization."""

import logging

import pytest

from src.pipeline.card_renderer.normalizer import (
    CanonicalRecord,
    DroppedRow,
    normalize_row,
    normalize_rows,
    normalize_type,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("PROMOÇÃO", "promocao"),
        ("promo", "promocao"),
        ("Super Promocao", "promocao"),
        (" Cupom ", "cupom"),
        ("CUPOM DESCONTO", "cupom"),
        ("Queda de preço", "queda"),
        ("bc", "bc"),
        (" BC ", "bc"),
        ("abc", ""),
        ("", ""),
        ("desconhecido", ""),
    ],
)
def test_normalize_type(raw, expected):
    assert normalize_type(raw) == expected


def test_normalize_row_defaults():
    rec = normalize_row({"tipo": "cupom", "valor": "10"}, 4)
    assert isinstance(rec, CanonicalRecord)
    assert rec.order == "4"
    assert rec.type_tag == "cupom"
    assert rec.category == "UNCATEGORIZED"
    assert rec.get("logo") == "blank.png"
    assert rec.get("value") == "10"
    assert rec.get("coupon") == ""
    assert rec.row_number == 4


def test_normalize_row_unrecognized_type_dropped():
    out = normalize_row({"tipo": "folheto"}, 2)
    assert out == DroppedRow(2, "unrecognized type 'folheto'")


def test_normalize_rows_keeps_batch_going(caplog):
    rows = [
        {"ordem": "1", "tipo": "promo", "categoria": "A"},
        {"ordem": "2", "tipo": "???"},
        {"ordem": "3", "tipo": "queda", "categoria": "B", "logo": "acme.png"},
    ]
    with caplog.at_level(logging.WARNING):
        records, dropped = normalize_rows(rows)
    assert [r.order for r in records] == ["1", "3"]
    assert records[1].get("logo") == "acme.png"
    assert [d.row_number for d in dropped] == [2]
    assert "Row 2" in caplog.text
