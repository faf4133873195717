"""
Error kinds raised by the exam core.

Core operations raise one of these instead of returning status codes; the
api app translates them to HTTP responses.
"""


class ExamHallError(Exception):
    default_detail = 'Request could not be completed.'

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(ExamHallError):
    """A required field is missing or a value does not fit the exam structure."""

    default_detail = 'Missing fields.'

    def __init__(self, detail=None, fields=None):
        self.fields = list(fields or [])
        super().__init__(detail)


class NotFound(ExamHallError):
    default_detail = 'Not found.'


class StorageError(ExamHallError):
    default_detail = 'Storage failure.'
