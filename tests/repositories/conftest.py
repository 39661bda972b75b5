import pytest
from sqlalchemy import Connection

from utiltrack.models.property import Property
from utiltrack.models.user import User
from utiltrack.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyPropertyRepository,
    SQLAlchemyTariffRepository,
    SQLAlchemyUserRepository,
)


@pytest.fixture()
def user_repo(db_connection: Connection) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db_connection)


@pytest.fixture()
def property_repo(db_connection: Connection) -> SQLAlchemyPropertyRepository:
    return SQLAlchemyPropertyRepository(db_connection)


@pytest.fixture()
def tariff_repo(db_connection: Connection) -> SQLAlchemyTariffRepository:
    return SQLAlchemyTariffRepository(db_connection)


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def owner(user_repo: SQLAlchemyUserRepository) -> User:
    return user_repo.create(User(email="owner@example.com", password_hash="hash"))


@pytest.fixture()
def home(property_repo: SQLAlchemyPropertyRepository, owner: User) -> Property:
    return property_repo.create(Property(owner_id=owner.id, name="Home", description="Flat"))
