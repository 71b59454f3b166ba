"""Custom dynaconf loader for loading cluster settings and converting them to KubernetesClient"""

from operator_verifier.kubernetes.client import KubernetesClient


# pylint: disable=unused-argument
def load(obj, env=None, silent=True, key=None, filename=None):
    """Creates KubernetesClient for the cluster"""
    cluster = obj.setdefault("cluster", {})
    if isinstance(cluster, KubernetesClient):
        return
    obj["cluster"] = KubernetesClient(
        cluster.get("project"), cluster.get("api_url"), cluster.get("token"), cluster.get("kubeconfig_path")
    )
