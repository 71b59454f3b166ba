"""This module implements an KubernetesCLI interface using oc/kubectl binary commands."""

from functools import cached_property

import openshift_client as oc
from openshift_client import Context, OpenShiftPythonException

from . import KubernetesObject
from .deployment import Deployment


class KubernetesClient:
    """KubernetesClient is a helper class for invoking kubectl commands"""

    def __init__(self, project: str = None, api_url: str = None, token: str = None, kubeconfig_path: str = None):
        self._project = project
        self._api_url = api_url
        self._token = token
        self._kubeconfig_path = kubeconfig_path

    @classmethod
    def from_context(cls, context: Context) -> "KubernetesClient":
        """Creates self from the context"""
        return cls(context.get_project(), context.get_api_url(), context.get_token(), context.get_kubeconfig_path())

    def change_project(self, project) -> "KubernetesClient":
        """Return new self with a different project"""
        return KubernetesClient(project, self._api_url, self._token, self._kubeconfig_path)

    @cached_property
    def context(self):
        """Prepare context for command execution"""
        context = Context()

        context.project_name = self._project
        context.api_server = self._api_url
        context.token = self._token
        context.kubeconfig_path = self._kubeconfig_path

        return context

    @property
    def api_url(self):
        """Returns real API url"""
        return self._api_url or self.inspect_context(jsonpath="{.clusters[*].cluster.server}")

    @property
    def project(self):
        """Returns real Kubernetes namespace name"""
        with self.context:
            return oc.get_project_name()

    @property
    def connected(self):
        """Returns True, if user is logged in and the project exists"""
        try:
            self.do_action("get", "ns", self._project)
        except OpenShiftPythonException:
            return False
        return True

    def get_object(self, resource: str, name: str, cls=KubernetesObject):
        """Returns object of given resource type and name, or None if it does not exist"""
        with self.context:
            return oc.selector(f"{resource}/{name}").object(cls=cls, ignore_not_found=True)

    def get_objects(self, resource: str, cls=KubernetesObject) -> list:
        """Returns all objects of given resource type in the current project"""
        with self.context:
            return oc.selector(resource).objects(cls=cls)

    def get_deployment(self, name: str):
        """Returns Deployment with the given name, or None if it does not exist"""
        return self.get_object("deployment", name, cls=Deployment)

    def create(self, model: dict, cls=KubernetesObject):
        """Creates new object on the server from its dictionary model and returns it"""
        obj = cls(model, context=self.context)
        return obj.commit()

    def do_action(self, verb: str, *args, stdin_str=None, auto_raise: bool = True):
        """Run an oc command."""
        with self.context:
            return oc.invoke(verb, args, stdin_str=stdin_str, auto_raise=auto_raise)

    def inspect_context(self, jsonpath, raw=False):
        """Returns jsonpath from the current context"""
        return (
            self.do_action("config", "view", f'--output=jsonpath="{jsonpath}"', f"--raw={raw}", "--minify=true")
            .out()
            .replace('"', "")
            .strip()
        )
