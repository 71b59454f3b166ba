"""Deployment related objects"""

from openshift_client import Missing

from . import KubernetesObject


class Deployment(KubernetesObject):
    """Kubernetes Deployment object"""

    @property
    def replicas(self) -> int:
        """Returns desired number of replicas from spec"""
        replicas = self.model.spec.replicas
        return 1 if replicas is Missing else int(replicas)

    @property
    def ready_replicas(self) -> int:
        """Returns number of ready replicas, 0 if the status does not report any yet"""
        ready = self.model.status.readyReplicas
        return 0 if ready is Missing else int(ready)
