
class LedgerError(Exception):
    """Base class for ledger errors."""


class StoreError(LedgerError):
    """A store operation could not be carried out."""


class MissingUserError(StoreError):
    """A write was attempted without an owning user id."""


class MissingIdError(StoreError):
    """An update was attempted on a record that has no id."""


class NotFoundError(StoreError):
    """No record with the given id exists for the user."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"{collection} record {record_id!r} not found")
        self.collection = collection
        self.record_id = record_id
