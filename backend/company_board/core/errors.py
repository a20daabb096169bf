class StoreError(Exception):
    """A store operation failed (transport, constraint or missing record)."""


class RecordNotFound(StoreError):
    def __init__(self, record_id: str):
        super().__init__(f"Company {record_id} not found")
        self.record_id = record_id


class CapacityError(Exception):
    """Creating another record would exceed the advisory cap."""

    def __init__(self, limit: int):
        super().__init__(f"You can only add up to {limit} companies")
        self.limit = limit
