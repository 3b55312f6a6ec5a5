from datetime import timedelta

import pytest

from kubra_market.core import rentals as rental_service
from kubra_market.core.config import utcnow
from kubra_market.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from kubra_market.models.notification import Notification
from kubra_market.models.rental import Rental

from helpers import make_merchant, make_rental


def test_current_rental_is_earliest_unpaid_future_due(db):
    merchant = make_merchant(db)
    make_rental(db, merchant, due_in_days=-3)                 # overdue
    make_rental(db, merchant, due_in_days=2, is_paid=True)    # already paid
    later = make_rental(db, merchant, due_in_days=40)
    sooner = make_rental(db, merchant, due_in_days=9)

    current = rental_service.get_current_rental(db, merchant.id)

    assert current.id == sooner.id
    assert current.id != later.id


def test_current_rental_none_when_nothing_upcoming(db):
    merchant = make_merchant(db)
    make_rental(db, merchant, due_in_days=-1)

    assert rental_service.get_current_rental(db, merchant.id) is None


def test_current_rental_is_per_merchant(db):
    first = make_merchant(db, "first")
    second = make_merchant(db, "second")
    make_rental(db, first, due_in_days=5)

    assert rental_service.get_current_rental(db, second.id) is None


def test_current_rental_respects_given_clock(db):
    merchant = make_merchant(db)
    rental = make_rental(db, merchant, due_in_days=5)

    assert rental_service.get_current_rental(db, merchant.id, now=utcnow() + timedelta(days=6)) is None
    assert rental_service.get_current_rental(db, merchant.id, now=utcnow()).id == rental.id


def test_pay_rental_marks_paid_and_notifies(db):
    merchant = make_merchant(db)
    rental = make_rental(db, merchant, amount="25000.00")

    paid = rental_service.pay_rental(db, merchant.id, rental.id)

    assert paid.is_paid is True
    note = db.query(Notification).filter(Notification.merchant_id == merchant.id).one()
    assert note.type == "rental"
    assert note.title == "Rental Payment Successful"
    assert "25,000.00" in note.message


def test_paying_twice_is_rejected_without_side_effects(db):
    merchant = make_merchant(db)
    rental = make_rental(db, merchant)
    rental_service.pay_rental(db, merchant.id, rental.id)
    paid_at = db.get(Rental, rental.id).updated_at

    with pytest.raises(ValidationError) as exc:
        rental_service.pay_rental(db, merchant.id, rental.id)

    assert exc.value.detail == "Rental is already paid"
    db.expire_all()
    assert db.get(Rental, rental.id).updated_at == paid_at
    assert db.query(Notification).count() == 1


def test_pay_rental_of_another_merchant_is_forbidden(db):
    owner = make_merchant(db, "owner")
    other = make_merchant(db, "other")
    rental = make_rental(db, owner)

    with pytest.raises(AuthorizationError):
        rental_service.pay_rental(db, other.id, rental.id)
    with pytest.raises(NotFoundError):
        rental_service.pay_rental(db, owner.id, 777)

    db.expire_all()
    assert db.get(Rental, rental.id).is_paid is False
    assert db.query(Notification).count() == 0


def test_list_rentals_orders_by_due_date(db):
    merchant = make_merchant(db)
    late = make_rental(db, merchant, due_in_days=60)
    early = make_rental(db, merchant, due_in_days=-10)
    middle = make_rental(db, merchant, due_in_days=15)

    assert [r.id for r in rental_service.list_rentals(db, merchant.id)] == [early.id, middle.id, late.id]
