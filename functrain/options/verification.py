from ..errors import InvalidArguments


def verify_positive(name: str, value) -> None:
    if value <= 0:
        msg = f"Option '{name}' must be positive (got {value})."
        raise InvalidArguments(msg)
    return


def verify_non_negative(name: str, value) -> None:
    if value < 0:
        msg = f"Option '{name}' must be non-negative (got {value})."
        raise InvalidArguments(msg)
    return


def verify_max_rank(max_rank: int|None) -> None:
    if max_rank is not None and max_rank < 1:
        msg = f"Option 'max_rank' must be at least 1 (got {max_rank})."
        raise InvalidArguments(msg)
    return
