"""Exception types for the adaptive maze simulation."""


class AdaptiveMazeError(Exception):
    """Base class for simulation errors."""


class InvalidConfiguration(AdaptiveMazeError, ValueError):
    """Grid dimensions, positions or budget are not usable."""


class Unsatisfiable(AdaptiveMazeError):
    """
    Obstacle generation could not place the requested number of obstacles.

    Raised either up front, when fewer free cells exist than the budget asks
    for, or after the rejection cap of the sampler has been hit.
    """

    def __init__(self, budget: int, available: int, rejections: int = 0):
        self.budget = budget
        self.available = available
        self.rejections = rejections
        if available < budget:
            message = (f"budget {budget} exceeds {available} free cells")
        else:
            message = (f"placed fewer than {budget} obstacles after "
                       f"{rejections} rejected draws")
        super().__init__(message)
