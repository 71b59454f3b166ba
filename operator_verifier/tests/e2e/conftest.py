"""Conftest for tests running against a live cluster with the operator installed"""

import pytest

from operator_verifier.checks import deployment_replicas
from operator_verifier.kubernetes.client import KubernetesClient
from operator_verifier.ocm_agent import OcmAgentConfig, make_ocm_agent
from operator_verifier.poller import ConvergencePoller, ObservationTarget
from operator_verifier.resource import ResourceEnsurer
from operator_verifier.store import KubernetesStore
from operator_verifier.verification import verify


@pytest.fixture(scope="session")
def cluster(testconfig, skip_or_fail) -> KubernetesClient:
    """Kubernetes client for the namespace the operator is installed in"""
    testconfig.validators.validate(only="operator")
    project = testconfig["operator"]["namespace"]
    client = testconfig["cluster"].change_project(project)
    if not client.connected:
        skip_or_fail(f"You are not logged into Kubernetes or the {project} namespace doesn't exist")
    return client


@pytest.fixture(scope="session")
def poller(testconfig):
    """Poller configured from the settings"""
    testconfig.validators.validate(only="polling")
    polling = testconfig["polling"]
    return ConvergencePoller(polling["interval"], polling["deadline"], polling["max_consecutive_failures"])


@pytest.fixture(scope="session")
def ensurer(testconfig):
    """ResourceEnsurer working directly against the cluster"""
    return ResourceEnsurer(KubernetesStore(testconfig["cluster"]))


@pytest.fixture(scope="module")
def ocm_agent(testconfig, cluster):
    """Desired OcmAgent resource"""
    testconfig.validators.validate(only="ocm_agent")
    return make_ocm_agent(OcmAgentConfig.from_settings(testconfig["ocm_agent"]), cluster.project)


@pytest.fixture(scope="module")
def verification(request, ensurer, poller, ocm_agent, cluster):
    """Ensures OcmAgent exists and waits until its Deployment has all replicas ready"""
    target = ObservationTarget(ocm_agent.namespace, ocm_agent.name, ocm_agent.spec.replicas)
    report = verify(ensurer, poller, ocm_agent, target, deployment_replicas(cluster, ocm_agent.name))
    if not report.existed:
        request.addfinalizer(lambda: ensurer.remove(ocm_agent))
    return report
