class ManagerError(RuntimeError):
    """Base class for failures surfaced to the person using a manager."""


class ReadError(ManagerError):
    pass


class WriteError(ManagerError):
    pass


class DuplicateSubmitError(WriteError):
    pass


class InvalidFormError(ManagerError):
    pass
