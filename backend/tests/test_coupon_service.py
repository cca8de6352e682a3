"""Tests for CouponService business logic."""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import DuplicateCouponCode, ExpirationInPast, InvalidCodeLength
from app.models.coupon import Coupon
from app.repositories.coupon_repository import CouponRepository
from app.schemas.coupon import CouponCreate
from app.services.coupon_service import CouponDeletion, CouponListing, CouponService


def _data(code="PROMO1", description="Test coupon", discount="10.00", days=5):
    return CouponCreate(
        code=code,
        description=description,
        discount_value=Decimal(discount),
        expiration_date=date.today() + timedelta(days=days),
    )


@pytest.fixture
def service(db_session):
    return CouponService(db_session)


class TestCreateCoupon:
    def test_creates_sanitized_coupon(self, service):
        coupon = service.create_coupon(_data(code="promo@#$1"))

        assert coupon.id is not None
        assert coupon.code == "PROMO1"
        assert coupon.deleted is False

    def test_uses_given_reference_date(self, service):
        with pytest.raises(ExpirationInPast):
            service.create_coupon(_data(days=0), today=date.today() + timedelta(days=1))

    def test_invalid_coupon_is_not_persisted(self, service, db_session):
        with pytest.raises(InvalidCodeLength):
            service.create_coupon(_data(code="ABC"))
        assert db_session.query(Coupon).count() == 0

    def test_duplicate_sanitized_code(self, service):
        service.create_coupon(_data(code="DUP-001"))

        with pytest.raises(DuplicateCouponCode) as exc_info:
            service.create_coupon(_data(code="dup001"))
        assert exc_info.value.code == "DUP001"

    def test_duplicate_of_deleted_coupon(self, service):
        coupon = service.create_coupon(_data(code="REUSE1"))
        service.delete_coupon(coupon.id)

        with pytest.raises(DuplicateCouponCode):
            service.create_coupon(_data(code="REUSE1"))

    def test_race_past_precheck_hits_unique_constraint(self, service):
        service.create_coupon(_data(code="RACE01"))

        # Simulate a concurrent insert that happened after our lookup
        with (
            patch.object(CouponRepository, "get_by_code", return_value=None),
            pytest.raises(IntegrityError),
        ):
            service.create_coupon(_data(code="RACE01"))


class TestDeleteCoupon:
    def test_delete_active_coupon(self, service, db_session):
        coupon = service.create_coupon(_data())

        assert service.delete_coupon(coupon.id) is CouponDeletion.DELETED

        row = db_session.query(Coupon).filter(Coupon.id == coupon.id).one()
        assert row.deleted is True

    def test_delete_twice_reports_already_deleted(self, service):
        coupon = service.create_coupon(_data())
        service.delete_coupon(coupon.id)

        assert service.delete_coupon(coupon.id) is CouponDeletion.ALREADY_DELETED
        assert service.coupon_repo.is_deleted(coupon.id) is True

    def test_delete_unknown_coupon(self, service):
        assert service.delete_coupon(uuid4()) is CouponDeletion.NOT_FOUND

    def test_already_deleted_does_not_write(self, service):
        coupon = service.create_coupon(_data())
        service.delete_coupon(coupon.id)

        with patch.object(CouponRepository, "soft_delete") as soft_delete:
            service.delete_coupon(coupon.id)
            service.delete_coupon(uuid4())
        soft_delete.assert_not_called()


class TestListCoupons:
    def test_blank_search_lists_everything(self, service):
        service.create_coupon(_data(code="AAAAA1"))
        service.create_coupon(_data(code="BBBBB1"))

        for search in (None, "", "   "):
            listing = service.list_coupons(search=search)
            assert listing.total == 2
            assert len(listing.items) == 2

    def test_search_filters_by_code_or_description(self, service):
        service.create_coupon(_data(code="NATAL1", description="Default description"))
        service.create_coupon(_data(code="OTHER1", description="Another one"))

        listing = service.list_coupons(search="NAT")
        assert [c.code for c in listing.items] == ["NATAL1"]

        listing = service.list_coupons(search="default")
        assert [c.code for c in listing.items] == ["NATAL1"]

    def test_search_term_is_not_trimmed(self, service):
        service.create_coupon(_data(code="WHOLE1", description="wholesale"))

        assert service.list_coupons(search="sale").total == 1
        assert service.list_coupons(search=" sale").total == 0
        assert service.list_coupons(search="wholesale ").total == 0

    def test_deleted_coupons_are_not_listed(self, service):
        coupon = service.create_coupon(_data(code="SOFTD1"))
        service.delete_coupon(coupon.id)

        assert service.list_coupons().total == 0
        assert service.list_coupons(search="SOFT").items == []

    def test_default_sort_is_expiration_ascending(self, service):
        service.create_coupon(_data(code="LATER1", days=20))
        service.create_coupon(_data(code="SOONER", days=2))

        assert [c.code for c in service.list_coupons().items] == ["SOONER", "LATER1"]

    @pytest.mark.parametrize(
        "sort", ["discountValue:desc", "discount_value:desc", "discountValue,desc"]
    )
    def test_sort_by_discount(self, service, sort):
        service.create_coupon(_data(code="SMALL1", discount="1.00"))
        service.create_coupon(_data(code="LARGE1", discount="50.00"))

        assert [c.code for c in service.list_coupons(sort=sort).items] == ["LARGE1", "SMALL1"]

    def test_unknown_sort_field_falls_back_to_default(self, service):
        service.create_coupon(_data(code="LATER2", days=20))
        service.create_coupon(_data(code="SOONE2", days=2))

        listing = service.list_coupons(sort="deleted:desc")
        assert [c.code for c in listing.items] == ["SOONE2", "LATER2"]

    def test_pagination(self, service):
        for i in range(7):
            service.create_coupon(_data(code=f"PAGED{i}", days=i + 1))

        listing = service.list_coupons(page=1, size=3)
        assert [c.code for c in listing.items] == ["PAGED3", "PAGED4", "PAGED5"]
        assert listing.total == 7
        assert listing.total_pages == 3


class TestCouponListing:
    def test_total_pages(self):
        assert CouponListing(items=[], page=0, size=10, total=0).total_pages == 0
        assert CouponListing(items=[], page=0, size=10, total=10).total_pages == 1
        assert CouponListing(items=[], page=0, size=10, total=11).total_pages == 2
