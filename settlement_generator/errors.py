"""
Exceptions raised while generating a settlement
"""


class StructuralError(ValueError):
    """Generated geometry violates a structural constraint; a retry may succeed"""


class BadCitadelShapeError(StructuralError):
    def __init__(self, message="Bad citadel shape!"):
        super().__init__(message)


class BadWallShapeError(StructuralError):
    def __init__(self, message="Bad walled area shape!"):
        super().__init__(message)


class StreetRoutingError(StructuralError):
    def __init__(self, message="Unable to build a street!"):
        super().__init__(message)


class GenerationError(RuntimeError):
    """Every generation attempt failed"""

    def __init__(self, attempts, message=None):
        self.attempts = attempts
        super().__init__(message or f"Failed to generate after {attempts} attempts")
