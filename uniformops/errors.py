class UniformOpsError(Exception):
    """Base class for errors surfaced to the reviewer."""


class NotFound(UniformOpsError):
    pass


class StagingNotFound(NotFound):
    def __init__(self, import_id: int):
        super().__init__(f"Imported order {import_id} not found")
        self.import_id = import_id


class OrderNotFound(NotFound):
    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class StagingNotPending(UniformOpsError):
    def __init__(self, import_id: int, status: str):
        super().__init__(f"Imported order {import_id} is already {status}")
        self.import_id = import_id
        self.status = status


class InvalidInput(UniformOpsError):
    """Rejected before any backend call was made."""


class ConfirmationRequired(InvalidInput):
    pass


class BackendError(UniformOpsError):
    def __init__(self, operation: str, table: str, cause: Exception | None = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} on {table} failed{detail}")
        self.operation = operation
        self.table = table
        self.cause = cause
