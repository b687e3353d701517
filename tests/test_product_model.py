# tests/test_product_model.py

"""Tests for the Product and Rating dataclasses."""

import unittest

from src.models.product import Product, Rating


class TestProductModel(unittest.TestCase):
    """Product dataclass unit tests."""

    def test_init_with_all_fields(self) -> None:
        """All fields are stored correctly."""
        product = Product(
            id=1,
            title="Backpack",
            price=109.95,
            category="men's clothing",
            description="Fits 15 inch laptops",
            image="https://example.com/1.jpg",
            rating=Rating(rate=3.9, count=120),
        )
        self.assertEqual(product.id, 1)
        self.assertEqual(product.title, "Backpack")
        self.assertEqual(product.price, 109.95)
        self.assertEqual(product.category, "men's clothing")
        self.assertEqual(product.description, "Fits 15 inch laptops")
        self.assertEqual(product.image, "https://example.com/1.jpg")
        self.assertEqual(product.rating.rate, 3.9)
        self.assertEqual(product.rating.count, 120)

    def test_defaults(self) -> None:
        """Optional fields default to empty values and a zero rating."""
        product = Product(id=2, title="X", price=1.0)
        self.assertEqual(product.category, "")
        self.assertEqual(product.description, "")
        self.assertEqual(product.image, "")
        self.assertEqual(product.rating, Rating(rate=0.0, count=0))

    def test_default_ratings_are_independent(self) -> None:
        """Each product gets its own Rating instance."""
        a = Product(id=1, title="A", price=1.0)
        b = Product(id=2, title="B", price=1.0)
        a.rating.count = 5
        self.assertEqual(b.rating.count, 0)

    def test_equality(self) -> None:
        """Two products with identical fields are equal."""
        a = Product(id=1, title="A", price=10.0)
        b = Product(id=1, title="A", price=10.0)
        self.assertEqual(a, b)

    def test_inequality_different_rating(self) -> None:
        """Products with different ratings are not equal."""
        a = Product(id=1, title="A", price=10.0, rating=Rating(4.5, 10))
        b = Product(id=1, title="A", price=10.0, rating=Rating(4.5, 11))
        self.assertNotEqual(a, b)

    def test_to_dict_nests_rating(self) -> None:
        """to_dict produces the upstream wire shape."""
        product = Product(
            id=1, title="A", price=10.0, rating=Rating(4.5, 10),
        )
        data = product.to_dict()
        self.assertEqual(data["id"], 1)
        self.assertEqual(data["rating"], {"rate": 4.5, "count": 10})
        self.assertNotIn("rating_rate", data)


if __name__ == "__main__":
    unittest.main()
