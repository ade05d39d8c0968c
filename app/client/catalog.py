# app/client/catalog.py
from sqlmodel import SQLModel, Field


class Product(SQLModel):
    """
    Merchandise item shown on the shop page.
    """

    id: str
    name: str
    price: float = Field(gt=0)
    image: str
    description: str


PRODUCTS: list[Product] = [
    Product(
        id="1",
        name="Conservation T-Shirt",
        price=29.99,
        image="product-tshirt.jpg",
        description="Eco-friendly cotton t-shirt with woodland logo. Comfortable and sustainable.",
    ),
    Product(
        id="2",
        name="Earth Hoodie",
        price=59.99,
        image="product-hoodie.jpg",
        description="Warm organic cotton hoodie perfect for outdoor adventures.",
    ),
    Product(
        id="3",
        name="Forest Cap",
        price=24.99,
        image="product-cap.jpg",
        description="Embroidered baseball cap with tree logo. One size fits all.",
    ),
    Product(
        id="4",
        name="Trail Pants",
        price=79.99,
        image="product-tshirt.jpg",
        description="Durable outdoor pants designed for hiking and conservation work.",
    ),
    Product(
        id="5",
        name="Nature Tote Bag",
        price=19.99,
        image="product-cap.jpg",
        description="Reusable canvas tote bag for everyday use. Reduce plastic waste!",
    ),
    Product(
        id="6",
        name="Conservation Mug",
        price=14.99,
        image="product-hoodie.jpg",
        description="Insulated travel mug to keep your beverages hot or cold.",
    ),
]


def get_product(product_id: str) -> Product | None:
    return next((p for p in PRODUCTS if p.id == product_id), None)
