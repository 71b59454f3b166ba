"""Kubernetes common objects"""

from openshift_client import APIObject, timeout


def resource_type(kind: str, api_version: str) -> str:
    """
    Returns fully qualified resource type usable in selectors, e.g. `ocmagent.ocmagent.managed.openshift.io`
    Objects from the core group (apiVersion without a group, like `v1`) are addressed just by their kind
    """
    if "/" not in api_version:
        return kind.lower()
    group = api_version.split("/", 1)[0]
    return f"{kind.lower()}.{group}"


class KubernetesObject(APIObject):
    """APIObject which can be created on and removed from the server"""

    def commit(self):
        """
        Creates object on the server and returns created entity.
        It will be the same class but attributes might differ, due to server adding/rejecting some of them.
        """
        self.create(["--save-config=true"])
        return self.refresh()

    def delete(self, ignore_not_found=True, cmd_args=None):
        """Deletes the resource, by default ignored not found"""
        with timeout(30):
            return super().delete(ignore_not_found, cmd_args)
