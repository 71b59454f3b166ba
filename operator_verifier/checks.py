"""Checks of operator installation and of the workloads it manages"""

import logging

import backoff
from openshift_client import OpenShiftPythonException

from operator_verifier.exceptions import TransientObservationError
from operator_verifier.kubernetes.client import KubernetesClient
from operator_verifier.poller import ConvergencePoller, ObservationTarget, Observer, PollOutcome

logger = logging.getLogger(__name__)


def deployment_replicas(client: KubernetesClient, name: str) -> Observer:
    """Returns observer reading number of ready replicas of the Deployment, missing Deployment has none"""

    def _observe():
        try:
            deployment = client.get_deployment(name)
        except OpenShiftPythonException as exc:
            raise TransientObservationError(f"Unable to read Deployment {name}: {exc.msg}") from exc
        # Deployment not created by the operator yet
        if deployment is None:
            return 0
        return deployment.ready_replicas

    return _observe


def check_deployment(client: KubernetesClient, name: str, replicas: int, poller: ConvergencePoller) -> PollOutcome:
    """Waits until the Deployment reports `replicas` ready replicas"""
    target = ObservationTarget(client.project, name, replicas)
    return poller.poll_until(target, deployment_replicas(client, name))


def check_cluster_service_version(client: KubernetesClient, operator_name: str, max_time: int = 120) -> bool:
    """True, if ClusterServiceVersion of the operator reaches Succeeded phase in time"""

    @backoff.on_predicate(backoff.constant, interval=10, jitter=None, max_time=max_time)
    def _succeeded():
        for csv in client.get_objects("clusterserviceversion"):
            if csv.name().startswith(operator_name):
                phase = csv.model.status.phase
                logger.debug("ClusterServiceVersion %s is in phase %s", csv.name(), phase)
                return phase == "Succeeded"
        logger.debug("ClusterServiceVersion for %s not found", operator_name)
        return False

    return _succeeded()


def _missing(client: KubernetesClient, resource: str, names: list[str]) -> list[str]:
    return [name for name in names if client.get_object(resource, name) is None]


def missing_cluster_roles(client: KubernetesClient, names: list[str]) -> list[str]:
    """Returns names of ClusterRoles which do not exist"""
    return _missing(client, "clusterrole", names)


def missing_cluster_role_bindings(client: KubernetesClient, names: list[str]) -> list[str]:
    """Returns names of ClusterRoleBindings which do not exist"""
    return _missing(client, "clusterrolebinding", names)
