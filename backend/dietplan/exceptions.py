class InvalidArgumentError(ValueError):
    """
    A caller supplied an argument the query layer refuses to run with
    (blank search term, non-positive id, unknown diet/limitation/vitamin type).
    Always raised before any statement reaches the database.
    """

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ToolNotFoundError(LookupError):
    """No tool with the requested name is registered."""

    def __init__(self, name: str):
        super().__init__(f"Tool '{name}' is not registered")
        self.name = name
