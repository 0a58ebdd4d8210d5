from typing import Any


def is_empty_value(value: Any) -> bool:
    """ Is the value empty, so that a filter with it should be skipped?

    Empty: None, "", and empty arrays.
    Not empty: numbers (0 included), booleans, and everything else.
    """
    if value is None:
        return True
    elif isinstance(value, str):
        return value == ''
    elif isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    else:
        return False
