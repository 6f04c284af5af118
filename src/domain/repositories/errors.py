"""Store capability errors raised by repository implementations."""


class OrderedQueryUnavailable(Exception):
    """The store cannot serve an ordered query (e.g. the index is missing)."""

    def __init__(self, collection: str, field: str) -> None:
        self.collection = collection
        self.field = field
        super().__init__(f"Ordered query on {collection}.{field} is unavailable")
