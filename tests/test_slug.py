"""Tests for recipe slug generation."""

import pytest

from domain.slug import slugify, transliterate


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Баница", "banitsa"),
        ("Шопска салата", "shopska-salata"),
        ("  Пиле с ориз  ", "pile-s-oriz"),
        ("Щрудел с ябълки", "shtrudel-s-yabalki"),
        ("Crème Brûlée!", "creme-brulee"),
        ("Mac & Cheese", "mac-cheese"),
        ("snake_case -- title", "snake-case-title"),
    ],
)
def test_slugify_examples(title, expected):
    assert slugify(title) == expected


def test_slugify_is_idempotent():
    for title in ("Баница", "Таратор (студена супа)", "Tarator: cold soup", "Жълт   кашкавал"):
        once = slugify(title)
        assert slugify(once) == once


def test_slugify_output_alphabet():
    slug = slugify("Мусака по бабина рецепта, 2 порции!")
    assert slug == "musaka-po-babina-retsepta-2-portsii"
    assert all(ch.isascii() and (ch.isalnum() or ch == "-") for ch in slug)


def test_slugify_of_symbols_only_is_empty():
    assert slugify("!!! ???") == ""


def test_transliterate_keeps_latin_untouched():
    assert transliterate("soup") == "soup"
    assert transliterate("чорба") == "chorba"
