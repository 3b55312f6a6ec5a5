"""Row builders and API shortcuts shared by the test modules."""
from datetime import timedelta
from decimal import Decimal

from kubra_market.core.config import utcnow
from kubra_market.models.merchant import Merchant, Shop
from kubra_market.models.product import Product
from kubra_market.models.rental import Rental


def register_and_login(client, username, password="secret123", with_shop=True):
    """Register a merchant through the API, log in, optionally open its shop."""
    resp = client.post("/api/auth/register", json={
        "username": username,
        "password": password,
        "name": f"{username.title()} Stores",
        "email": f"{username}@example.com",
        "phone": "9876543210",
    })
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    merchant = resp.json()

    if with_shop:
        resp = client.post("/api/shop", json={
            "name": f"{username.title()} Corner",
            "phone": "9876543210",
            "address": "12 Market Road",
        })
        assert resp.status_code == 201, resp.text
    return merchant


# --- direct row builders for service-level tests ---

def make_merchant(db, username="merchant", with_shop=True):
    merchant = Merchant(
        username=username,
        password_hash="not-a-real-hash",
        name=f"{username} name",
        email=f"{username}@example.com",
        phone="9876543210",
    )
    db.add(merchant)
    db.flush()
    if with_shop:
        db.add(Shop(merchant_id=merchant.id, name=f"{username} shop", phone="123", address="Main road"))
    db.commit()
    db.refresh(merchant)
    return merchant


def make_product(db, merchant, name="Widget", price="10.00", stock=10):
    product = Product(
        merchant_id=merchant.id,
        shop_id=merchant.shop.id,
        name=name,
        description=f"{name} description",
        price=Decimal(price),
        stock=stock,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def make_rental(db, merchant, amount="25000.00", due_in_days=10, is_paid=False):
    now = utcnow()
    rental = Rental(
        merchant_id=merchant.id,
        shop_id=merchant.shop.id,
        amount=Decimal(amount),
        start_date=now - timedelta(days=20),
        due_date=now + timedelta(days=due_in_days),
        is_paid=is_paid,
    )
    db.add(rental)
    db.commit()
    db.refresh(rental)
    return rental
