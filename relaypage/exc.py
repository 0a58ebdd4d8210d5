class BaseRelayPageException(Exception):
    pass


class PaginationArgumentsError(BaseRelayPageException):
    """ Invalid pagination arguments provided by the User

    Reported when `first`, `last`, `after`, `before` or the cursor column make no sense together
    """

    def __init__(self, err: str):
        super().__init__(f'Pagination arguments error: {err}')


class InvalidCursorError(PaginationArgumentsError):
    """ The provided cursor could not be decoded

    Reported when a cursor is not valid base64, not valid UTF-8, or its value can't be converted
    into the type of the column that the query is sorted by
    """

    def __init__(self, cursor: str, err: str):
        self.cursor = cursor
        super().__init__(f'invalid cursor {cursor!r}: {err}')


class InvalidColumnError(BaseRelayPageException):
    """ Query mentioned an invalid column name

    Reported when a column mentioned by name is not found on the SqlAlchemy model
    """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{model}" specified in {where}')


class InvalidRelationError(InvalidColumnError):
    """ Query mentioned an invalid relationship name

    Reported when a relation mentioned by name is not found on the SqlAlchemy model
    """


class FilterError(BaseRelayPageException):
    """ Invalid filter expression provided by the User """


class UnknownOperatorError(FilterError):
    """ A filter uses an operator that the compiler does not support """

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f'Unknown filter operation: {operator}')


class MalformedFieldError(FilterError):
    """ A filter field path can't be used

    Reported when a field has no "Entity." prefix, or when a relation path points to an entity that was never joined
    """

    def __init__(self, field: str, err: str):
        self.field = field
        super().__init__(f'Malformed filter field "{field}": {err}')
