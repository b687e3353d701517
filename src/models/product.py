# src/models/product.py

"""Product data model shared by the remote source, cache and controller."""

from dataclasses import dataclass, field


@dataclass
class Rating:
    """Aggregate customer rating of a product."""

    rate: float = 0.0
    count: int = 0


@dataclass
class Product:
    """A single catalog product, in its nested (wire) shape."""

    id: int
    title: str
    price: float
    category: str = ""
    description: str = ""
    image: str = ""
    rating: Rating = field(default_factory=Rating)

    def to_dict(self) -> dict[str, object]:
        """Serialise to the upstream JSON shape (rating nested)."""
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "rating": {
                "rate": self.rating.rate,
                "count": self.rating.count,
            },
        }
