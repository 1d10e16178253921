class OrderingError(Exception):
    """Base error raised by sibling stores."""


class ReadFailure(OrderingError):
    """The store could not read a sibling group or member."""


class WriteFailure(OrderingError):
    """The store could not insert, update or delete a member."""
