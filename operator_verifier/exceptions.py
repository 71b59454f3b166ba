"""Exceptions raised while ensuring resources and observing their reconciliation"""


class VerifierException(Exception):
    """Base class for all operator verifier errors"""


class StoreError(VerifierException):
    """Call to the remote object store failed"""

    def __init__(self, message, namespace=None, resource=None, name=None):
        super().__init__(message)
        self.namespace = namespace
        self.resource = resource
        self.name = name

    @property
    def identity(self):
        """Returns namespace/resource/name of the object the call was made for"""
        return f"{self.namespace}/{self.resource}/{self.name}"

    def __str__(self):
        return f"{super().__str__()} ({self.identity})"


class NotFound(StoreError):
    """Object does not exist in the remote store"""


class AlreadyExists(StoreError):
    """Object could not be created because it already exists"""


class SchemaMismatch(VerifierException):
    """Object could not be converted between its typed and generic representation"""


class TransientObservationError(VerifierException):
    """Single observation of remote state failed, but might succeed if retried"""
