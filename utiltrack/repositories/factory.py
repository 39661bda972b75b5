from utiltrack.repositories.base import (
    BillRepository,
    PropertyRepository,
    TariffRepository,
    UserRepository,
)


def get_user_repository() -> UserRepository:
    from utiltrack.db import get_connection
    from utiltrack.repositories.sqlalchemy import SQLAlchemyUserRepository

    return SQLAlchemyUserRepository(get_connection())


def get_property_repository() -> PropertyRepository:
    from utiltrack.db import get_connection
    from utiltrack.repositories.sqlalchemy import SQLAlchemyPropertyRepository

    return SQLAlchemyPropertyRepository(get_connection())


def get_tariff_repository() -> TariffRepository:
    from utiltrack.db import get_connection
    from utiltrack.repositories.sqlalchemy import SQLAlchemyTariffRepository

    return SQLAlchemyTariffRepository(get_connection())


def get_bill_repository() -> BillRepository:
    from utiltrack.db import get_connection
    from utiltrack.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())
