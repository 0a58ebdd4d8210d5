from relaypage.typing import SAModelOrAlias
from .models import unaliased_class


def model_name(Model: SAModelOrAlias) -> str:
    """ Get the name of the Model for this class """
    # We can't do `Model.__name__` because we can be given a type of an aliased class
    return unaliased_class(Model).__name__


def split_field_path(path: str) -> tuple[str, str]:
    """ Split "Alias.column" into ("Alias", "column"). A bare "column" gives ("", "column") """
    alias, _, name = path.rpartition('.')
    return alias, name
