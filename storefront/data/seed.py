# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel

CATEGORIES = [
    ("Kurtis", "kurtis", "Hand-embroidered chikankari kurtis"),
    ("Sarees", "sarees", "Lucknowi chikankari sarees"),
    ("Dupattas", "dupattas", "Light georgette and mul dupattas"),
]

PRODUCTS = [
    # (category slug, name, sku, price, discount price, sizes)
    ("kurtis", "White Mul Cotton Kurti", "KUR-001", "1499", "1199", [("S", 4), ("M", 6), ("L", 2)]),
    ("kurtis", "Pastel Pink Georgette Kurti", "KUR-002", "1899", None, [("M", 3), ("L", 0)]),
    ("sarees", "Ivory Georgette Saree", "SAR-001", "4599", "3999", [("Free", 5)]),
    ("dupattas", "Mint Mul Dupatta", "DUP-001", "799", None, [("Free", 10)]),
]


def seed(db=None):
    own = db is None
    db = db or SessionLocal()
    try:
        # only seed an empty catalog
        if db.query(CategoryModel).first():
            return

        by_slug = {}
        for name, slug, description in CATEGORIES:
            category = CategoryModel(name=name, slug=slug, description=description)
            db.add(category)
            by_slug[slug] = category
        db.flush()

        for slug, name, sku, price, discount, sizes in PRODUCTS:
            size_options = [{"size": s, "stock": n} for s, n in sizes]
            db.add(
                ProductModel(
                    name=name,
                    category_id=by_slug[slug].id,
                    sku=sku,
                    price=Decimal(price),
                    discount_price=Decimal(discount) if discount else None,
                    sizes=size_options,
                    stock_quantity=sum(n for _, n in sizes),
                    fabric_details="Hand embroidered, gentle hand wash",
                )
            )
        db.commit()
    finally:
        if own:
            db.close()


if __name__ == "__main__":
    seed()
