"""Remote object store the verifier reads desired state from and writes it to"""

import abc
import logging

from openshift_client import OpenShiftPythonException

from operator_verifier.exceptions import StoreError, NotFound, AlreadyExists
from operator_verifier.kubernetes.client import KubernetesClient

logger = logging.getLogger(__name__)


class RemoteStore(abc.ABC):
    """
    Store holding objects in their generic (dictionary) representation.
    Objects are addressed by namespace, fully qualified resource type and name.
    """

    @abc.abstractmethod
    def get(self, namespace: str, resource: str, name: str) -> dict:
        """Returns the object, raises NotFound if it does not exist or StoreError for any other failure"""

    @abc.abstractmethod
    def create(self, namespace: str, obj: dict) -> dict:
        """Creates the object and returns it as stored, raises AlreadyExists or StoreError on failure"""

    @abc.abstractmethod
    def delete(self, namespace: str, resource: str, name: str) -> bool:
        """Deletes the object, returns False if there was nothing to delete"""


def _already_exists(exc: OpenShiftPythonException) -> bool:
    text = str(exc)
    return "AlreadyExists" in text or "already exists" in text


class KubernetesStore(RemoteStore):
    """RemoteStore backed by the cluster API server, accessed through oc/kubectl binary"""

    def __init__(self, client: KubernetesClient):
        self.client = client

    def get(self, namespace, resource, name):
        try:
            obj = self.client.change_project(namespace).get_object(resource, name)
        except OpenShiftPythonException as exc:
            raise StoreError(f"Unable to get object: {exc.msg}", namespace, resource, name) from exc
        if obj is None:
            raise NotFound("Object does not exist", namespace, resource, name)
        return obj.as_dict()

    def create(self, namespace, obj):
        name = obj.get("metadata", {}).get("name")
        resource = obj.get("kind")
        try:
            created = self.client.change_project(namespace).create(obj)
        except OpenShiftPythonException as exc:
            if _already_exists(exc):
                raise AlreadyExists("Object already exists", namespace, resource, name) from exc
            raise StoreError(f"Unable to create object: {exc.msg}", namespace, resource, name) from exc
        logger.info("Created %s %s in namespace %s", resource, name, namespace)
        return created.as_dict()

    def delete(self, namespace, resource, name):
        client = self.client.change_project(namespace)
        try:
            obj = client.get_object(resource, name)
            if obj is None:
                return False
            obj.delete()
        except OpenShiftPythonException as exc:
            raise StoreError(f"Unable to delete object: {exc.msg}", namespace, resource, name) from exc
        logger.info("Deleted %s %s in namespace %s", resource, name, namespace)
        return True
