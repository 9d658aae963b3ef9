class PodException(Exception):
    pass


class NotFoundException(PodException):
    pass


class InvalidDataException(PodException):
    pass


class OutOfRangeException(PodException):
    pass
