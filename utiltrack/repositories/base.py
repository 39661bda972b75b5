from abc import ABC, abstractmethod

from utiltrack.models.bill import BillRecord
from utiltrack.models.property import Property
from utiltrack.models.tariff import TariffConfiguration
from utiltrack.models.user import User


class PersistenceError(RuntimeError):
    """A configuration, bill or account could not be loaded or saved."""


class UserRepository(ABC):
    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_by_email(self, email: str) -> User | None: ...


class PropertyRepository(ABC):
    @abstractmethod
    def create(self, prop: Property) -> Property: ...

    @abstractmethod
    def get_by_id(self, property_id: int) -> Property | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Property | None: ...

    @abstractmethod
    def list_by_owner(self, owner_id: int) -> list[Property]: ...

    @abstractmethod
    def update_name(self, property_id: int, name: str) -> None: ...


class TariffRepository(ABC):
    @abstractmethod
    def get(self, property_id: int) -> TariffConfiguration | None: ...

    @abstractmethod
    def put(self, config: TariffConfiguration) -> TariffConfiguration: ...


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: BillRecord) -> BillRecord: ...

    @abstractmethod
    def get_by_id(self, bill_id: int) -> BillRecord | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> BillRecord | None: ...

    @abstractmethod
    def list_by_property(self, property_id: int) -> list[BillRecord]: ...

    @abstractmethod
    def update_name(self, bill_id: int, name: str) -> None: ...
