class ContactValidationError(Exception):
    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class PersistenceError(Exception):
    def __init__(self, message):
        super().__init__(message)


class TransportError(Exception):
    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)
