from .helper.constants import ValueType


class VTimeError(Exception):
    def __init__(self, msg, line_number=None):
        self.msg = msg
        self.line_number = line_number

    def __str__(self):
        if self.line_number is None:
            return repr(self.msg)
        return f"At line {self.line_number!s}: {self.msg!s}"


class TypeDecodeError(VTimeError):
    """A property value does not match the grammar of its value type."""

    def __init__(self, value_type, msg, line_number=None):
        super().__init__(msg, line_number)
        self.value_type = value_type


class InvalidDateError(TypeDecodeError):
    def __init__(self, msg, line_number=None):
        super().__init__(ValueType.DATE, msg, line_number)


class InvalidTimeError(TypeDecodeError):
    def __init__(self, msg, line_number=None):
        super().__init__(ValueType.TIME, msg, line_number)


class InvalidDateTimeError(TypeDecodeError):
    def __init__(self, msg, line_number=None):
        super().__init__(ValueType.DATE_TIME, msg, line_number)


class InvalidTimeRangeError(VTimeError):
    pass


class InvalidTimezoneError(VTimeError):
    pass


class MismatchedDateTimeKindError(InvalidDateTimeError, InvalidTimeRangeError):
    """Start and end of a range are date-times of different kinds."""


_decode_errors = {
    ValueType.DATE: InvalidDateError,
    ValueType.TIME: InvalidTimeError,
    ValueType.DATE_TIME: InvalidDateTimeError,
}


def decode_error(value_type, msg, line_number=None) -> TypeDecodeError:
    """
    Build the decode error for value_type, using the dedicated class where one exists.
    """
    error_class = _decode_errors.get(value_type)
    if error_class is None:
        return TypeDecodeError(value_type, msg, line_number)
    return error_class(msg, line_number)
