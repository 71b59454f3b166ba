"""Desired state objects and their idempotent creation in the remote store"""

import logging
from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass, is_dataclass
from typing import Any, Optional

from operator_verifier.exceptions import NotFound, AlreadyExists, SchemaMismatch
from operator_verifier.kubernetes import resource_type
from operator_verifier.store import RemoteStore
from operator_verifier.utils import asdict, fromdict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DesiredResource:
    """
    Declarative descriptor of a namespaced object which should exist in the remote store.
    `spec` is either a dataclass (typed spec fields) or a plain mapping.
    """

    kind: str
    api_version: str
    name: str
    namespace: str
    spec: Any = None
    labels: Optional[dict[str, str]] = None

    @property
    def resource(self) -> str:
        """Fully qualified resource type of the object"""
        return resource_type(self.kind, self.api_version)

    @property
    def identity(self) -> str:
        """Human readable identity of the object"""
        return f"{self.kind}/{self.name} in namespace {self.namespace}"

    def to_unstructured(self) -> dict:
        """Converts the resource into the generic representation used by the remote store"""
        if self.spec is None:
            spec = {}
        elif is_dataclass(self.spec):
            spec = asdict(self.spec)
        elif isinstance(self.spec, Mapping):
            spec = deepcopy(dict(self.spec))
        else:
            raise SchemaMismatch(f"Spec of {self.identity} must be a dataclass or mapping, not {type(self.spec)}")

        metadata: dict = {"name": self.name, "namespace": self.namespace}
        if self.labels:
            metadata["labels"] = dict(self.labels)
        return {"apiVersion": self.api_version, "kind": self.kind, "metadata": metadata, "spec": spec}

    @classmethod
    def from_unstructured(cls, obj: dict, spec_type=None) -> "DesiredResource":
        """
        Converts object in the generic representation back to DesiredResource.
        If `spec_type` dataclass is given, spec is converted to it, otherwise it stays a dictionary.
        Raises SchemaMismatch if the object does not have the expected shape.
        """
        try:
            metadata = obj["metadata"]
            kind = obj["kind"]
            api_version = obj["apiVersion"]
            name = metadata["name"]
            namespace = metadata.get("namespace")
            spec = obj.get("spec", {})
        except (KeyError, TypeError, AttributeError) as exc:
            raise SchemaMismatch(f"Object is missing required field {exc}") from exc

        if not isinstance(spec, dict):
            raise SchemaMismatch(f"Spec of {kind}/{name} is not an object")
        if spec_type is not None:
            try:
                spec = fromdict(spec_type, spec)
            except (TypeError, ValueError) as exc:
                raise SchemaMismatch(f"Spec of {kind}/{name} does not match {spec_type.__name__}: {exc}") from exc

        return cls(kind, api_version, name, namespace, spec, metadata.get("labels") or None)


class ResourceEnsurer:
    """Makes sure desired resources exist in the remote store, without overwriting existing ones"""

    def __init__(self, store: RemoteStore):
        self.store = store

    def get(self, desired: DesiredResource) -> DesiredResource:
        """Returns the live version of the resource, raises NotFound if it does not exist"""
        live = self.store.get(desired.namespace, desired.resource, desired.name)
        spec_type = type(desired.spec) if is_dataclass(desired.spec) else None
        existing = DesiredResource.from_unstructured(live, spec_type)
        if (existing.kind, existing.api_version) != (desired.kind, desired.api_version):
            raise SchemaMismatch(
                f"Expected {desired.api_version} {desired.kind}, "
                f"but {desired.name} is {existing.api_version} {existing.kind}"
            )
        return existing

    def ensure(self, desired: DesiredResource) -> bool:
        """
        Creates the resource if it does not exist yet.
        Returns True if it already existed and nothing was written, False if it was created.
        Any failure other than NotFound on the initial read is raised without attempting creation.
        """
        if not desired.namespace or not desired.name:
            raise ValueError(f"Namespace and name must be set for {desired.kind}")

        try:
            self.get(desired)
            logger.debug("%s already exists", desired.identity)
            return True
        except NotFound:
            pass

        obj = desired.to_unstructured()
        try:
            self.store.create(desired.namespace, obj)
        except AlreadyExists:
            logger.info("%s was created concurrently", desired.identity)
            return True
        logger.info("Created %s", desired.identity)
        return False

    def remove(self, desired: DesiredResource) -> bool:
        """Deletes the resource, returns False if it did not exist"""
        return self.store.delete(desired.namespace, desired.resource, desired.name)
