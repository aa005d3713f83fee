from decimal import Decimal

import pytest

from core import validation
from core.errors import ApiError
from forms.schemas import ContactRequest


@pytest.mark.parametrize("email", ["a@b.c", "ana@x.com", "ana.lopez+vip@mail.example.mx"])
def test_valid_emails(email):
    assert validation.is_valid_email(email)


@pytest.mark.parametrize("email", ["a@b", "a.com", "a @b.c", "a@b@c.d", "", None])
def test_invalid_emails(email):
    assert not validation.is_valid_email(email)


def test_text_fields_are_trimmed_and_numbers_become_strings():
    form = ContactRequest.model_validate({"nombre": "  Ana  ", "telefono": 5512345678, "extra": "x"})
    assert form.nombre == "Ana"
    assert form.telefono == "5512345678"
    assert form.email is None


def test_blank_required_field_is_missing():
    form = ContactRequest.model_validate(
        {"nombre": "Ana", "email": "ana@x.com", "telefono": "55", "mensaje": "   "}
    )
    with pytest.raises(ApiError) as err:
        validation.require_fields(form, form.required)
    assert err.value.status_code == 400
    assert err.value.message == "Por favor, completa todos los campos"


@pytest.mark.parametrize("raw, expected", [("3", 3), ("3.0", 3), ("-1", -1), (None, None), ("", None)])
def test_to_int(raw, expected):
    assert validation.to_int(raw, "cantidad") == expected


@pytest.mark.parametrize("raw", ["tres", "2.5", "NaN"])
def test_to_int_rejects_non_integers(raw):
    with pytest.raises(ApiError) as err:
        validation.to_int(raw, "cantidad")
    assert err.value.message == "El campo cantidad debe ser un número"


def test_to_decimal_accepts_comma_decimal_separator():
    assert validation.to_decimal("450,50", "total") == Decimal("450.50")


def test_to_decimal_rejects_text():
    with pytest.raises(ApiError):
        validation.to_decimal("mil", "total")


@pytest.mark.parametrize("raw", ["1e400000", "1e8", "99999999999", "2147483648", "0x10", "1_000"])
def test_to_int_rejects_exponents_and_out_of_range_values(raw):
    with pytest.raises(ApiError) as err:
        validation.to_int(raw, "edad")
    assert err.value.status_code == 400
    assert err.value.message == "El campo edad debe ser un número"


def test_to_int_accepts_the_32_bit_bounds():
    assert validation.to_int("2147483647", "cantidad") == 2147483647
    assert validation.to_int("-2147483648", "cantidad") == -2147483648


@pytest.mark.parametrize("raw", ["1e400000", "123456789", "1.005", "Infinity"])
def test_to_decimal_rejects_values_outside_money_columns(raw):
    with pytest.raises(ApiError):
        validation.to_decimal(raw, "total")


def test_to_decimal_accepts_largest_money_value():
    assert validation.to_decimal("99999999.99", "total") == Decimal("99999999.99")
