import enum


class Direction(enum.Enum):
    """The direction in which the cores of a function train are 
    swept over.
    """

    FORWARD = 1
    BACKWARD = -1

