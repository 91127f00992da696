# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from decimal import Decimal
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from vowswap.core.security import Role, create_access_token
from vowswap.db.session import Base, enforce_sqlite_foreign_keys
from vowswap.db.session import get_db as app_get_session
from vowswap.db.time import utcnow
from vowswap.main import app as fastapi_app
from vowswap.models import (
    ContentReport,
    ContentType,
    CouponCode,
    DiscountType,
    Promotion,
    PromotionType,
    User,
)

TEST_DB_URL = "sqlite://"

_EMAIL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = enforce_sqlite_foreign_keys(
        create_engine(
            TEST_DB_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

        # Services commit for real, so empty every table between tests.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with the given role."""

    def _make_user(role: Role = Role.CUSTOMER, name: str | None = None) -> User:
        number = next(_EMAIL_COUNTER)
        user = User(
            name=name or f"{role.value.title()} {number}",
            email=f"user{number}@vowswap.test",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user(Role.ADMIN, "Ada Admin")


@pytest.fixture()
def moderator_user(make_user: Callable[..., User]) -> User:
    return make_user(Role.MODERATOR, "Mo Moderator")


@pytest.fixture()
def seller_user(make_user: Callable[..., User]) -> User:
    return make_user(Role.SELLER, "Sam Seller")


@pytest.fixture()
def customer_user(make_user: Callable[..., User]) -> User:
    return make_user(Role.CUSTOMER, "Cara Customer")


@pytest.fixture()
def reported_user(make_user: Callable[..., User]) -> User:
    """A seller that reports are filed against."""
    return make_user(Role.SELLER, "Rory Reported")


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers carrying a token for ``user``."""
    token = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Expose the header builder to tests that mint tokens for ad-hoc users."""
    return auth_headers


@pytest.fixture()
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture()
def moderator_headers(moderator_user: User) -> dict[str, str]:
    return auth_headers(moderator_user)


@pytest.fixture()
def seller_headers(seller_user: User) -> dict[str, str]:
    return auth_headers(seller_user)


@pytest.fixture()
def customer_headers(customer_user: User) -> dict[str, str]:
    return auth_headers(customer_user)


@pytest.fixture()
def make_report(db_session: Session, customer_user: User) -> Callable[..., ContentReport]:
    """Return a factory persisting PENDING reports filed by the customer."""

    def _make_report(
        content_type: ContentType = ContentType.PRODUCT,
        content_id: str = "product-1",
        reason: str = "Counterfeit dress",
        reported_user: User | None = None,
        **fields: Any,
    ) -> ContentReport:
        report = ContentReport(
            content_type=content_type,
            content_id=content_id,
            reason=reason,
            reporter_id=customer_user.id,
            reported_user_id=reported_user.id if reported_user else None,
            **fields,
        )
        db_session.add(report)
        db_session.commit()
        db_session.refresh(report)
        return report

    return _make_report


@pytest.fixture()
def make_coupon(db_session: Session, seller_user: User) -> Callable[..., CouponCode]:
    """Return a factory persisting a running COUPON promotion with one code."""

    def _make_coupon(
        code: str = "SAVE10",
        discount_type: DiscountType = DiscountType.PERCENTAGE,
        discount_value: str | Decimal = "10",
        minimum_purchase: str | Decimal | None = None,
        max_uses: int | None = None,
        per_user_limit: int | None = None,
        used_count: int = 0,
        is_active: bool = True,
        starts_in: timedelta = timedelta(days=-1),
        ends_in: timedelta = timedelta(days=7),
        seller: User | None = None,
    ) -> CouponCode:
        now = utcnow()
        promotion = Promotion(
            seller_id=(seller or seller_user).id,
            name=f"{code} promotion",
            type=PromotionType.COUPON,
            start_date=now + starts_in,
            end_date=now + ends_in,
            is_active=is_active,
        )
        promotion.coupon_code = CouponCode(
            code=code,
            discount_type=discount_type,
            discount_value=Decimal(discount_value),
            minimum_purchase=Decimal(minimum_purchase) if minimum_purchase is not None else None,
            max_uses=max_uses,
            per_user_limit=per_user_limit,
            used_count=used_count,
        )
        db_session.add(promotion)
        db_session.commit()
        db_session.refresh(promotion)
        return promotion.coupon_code

    return _make_coupon
