from collections import abc
from functools import wraps
from typing import Any


# Borrowed from: funcy
def collecting(func):
    """ Make a generator function return a list

    Example:
        @collecting
        def parse_all(items):
            for item in items:
                yield parse(item)
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        return list(func(*args, **kwargs))
    return wrapper


def get_any(mapping: abc.Mapping, *keys: str, default: Any = None) -> Any:
    """ Get the value of the first key present in the mapping

    Example:
        get_any({'relation_field': 'a.b'}, 'relationField', 'relation_field')  #-> 'a.b'
    """
    for key in keys:
        if key in mapping:
            return mapping[key]
    return default
