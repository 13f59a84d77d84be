class ShapeResolutionError(Exception):
    """Base for everything ShapeResolver.resolve() can raise"""

    def __init__(self, message: str, pool_id: str = ""):
        super().__init__(message)
        self.pool_id = pool_id


class RemoteLookupError(ShapeResolutionError):
    """A remote OCI call failed. The SDK exception is chained as __cause__"""

    def __init__(self, message: str, pool_id: str = "", status: int = 0):
        super().__init__(message, pool_id)
        self.status = status


class MissingConfigurationError(ShapeResolutionError):
    pass


class UnsupportedConfigurationError(ShapeResolutionError):
    pass


class ShapeNotFoundError(ShapeResolutionError):
    pass


class InvalidShapeError(ShapeResolutionError):
    pass
