"""Tests for shopfeeds/mapping/categories.py"""

import pytest

from shopfeeds.mapping.categories import category_for, is_default_category, product_type_label


class TestGoogleCategories:
    @pytest.mark.parametrize("product_type,expected", [
        ("Γυναικεία Σκουλαρίκια", 194),
        ("Gold Earrings", 194),
        ("Γυναικεία Δαχτυλίδια", 200),
        ("Rings", 200),
        ("Ανδρικά Βραχιόλια", 191),
        ("Γυναικεία Κολιέ", 196),
        ("Γυναικεία Μενταγιόν", 192),
        ("Καρφίτσες", 197),
        ("Στέφανα Γάμου", 110),
        ("Gift Card", 53),
        ("Ρολόγια", 188),
        ("", 188),
    ])
    def test_taxonomy_ids(self, product_type, expected):
        assert category_for("google", product_type) == expected


class TestBestPriceCategories:
    def test_exact_match(self):
        assert category_for("bestprice", "Γυναικεία Δαχτυλίδια") == \
            "Κοσμήματα->Δαχτυλίδια->Γυναικεία δαχτυλίδια"

    def test_keyword_rule(self):
        assert category_for("bestprice", "Ανδρικά Βραχιόλια Δερμάτινα") == \
            "Κοσμήματα->Βραχιόλια->Ανδρικά βραχιόλια"

    def test_default(self):
        assert category_for("bestprice", "Ρολόγια") == "Κοσμήματα"

    def test_is_default_category(self):
        assert is_default_category("bestprice", "Ρολόγια")
        assert not is_default_category("bestprice", "Γυναικεία Κολιέ")
        assert not is_default_category("bestprice", "")


class TestGlamiCategories:
    def test_women_rings(self):
        assert category_for("glami", "Γυναικεία Δαχτυλίδια").endswith("| Γυναικεία δαχτυλίδια")

    def test_men_earrings_rule(self):
        assert category_for("glami", "Ανδρικά Σκουλαρίκια Κρεμαστά").startswith(
            "Glami.gr | Ανδρικά ρούχα και παπούτσια")

    def test_default_is_women_jewelry(self):
        assert category_for("glami", None) == \
            "Glami.gr | Γυναικεία ρούχα και παπούτσια | Γυναικεία κοσμήματα και ρολόγια"


class TestProductTypeLabel:
    @pytest.mark.parametrize("product_type,expected", [
        ("Earrings", "Earring"),
        ("Γυναικεία Σκουλαρίκια", "Earring"),
        ("Rings", "Ring"),
        ("Ανδρικά Δαχτυλίδια", "Ring"),
        ("Γυναικεία Κολιέ", "Necklace"),
        ("", "Jewelry"),
    ])
    def test_labels(self, product_type, expected):
        assert product_type_label(product_type) == expected


def test_unknown_feed_raises():
    with pytest.raises(ValueError):
        category_for("meta", "Rings")
