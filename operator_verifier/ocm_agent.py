"""OcmAgent custom resource managed by ocm-agent-operator"""

from dataclasses import dataclass, field

from operator_verifier.resource import DesiredResource

# pylint: disable=invalid-name

KIND = "OcmAgent"
API_VERSION = "ocmagent.managed.openshift.io/v1alpha1"


@dataclass(frozen=True)
class AgentConfig:
    """OcmAgent spec.agentConfig"""

    ocmBaseUrl: str
    services: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OcmAgentSpec:
    """OcmAgent spec"""

    agentConfig: AgentConfig
    ocmAgentConfig: str
    ocmAgentImage: str
    tokenSecret: str
    replicas: int = 1


@dataclass
class OcmAgentConfig:
    """Deployment parameters of the OcmAgent, usually loaded from settings"""

    image: str
    ocm_base_url: str
    token_secret: str
    config_ref: str
    services: list[str] = field(default_factory=lambda: ["service_logs"])
    replicas: int = 1
    name: str = "ocm-agent"

    @classmethod
    def from_settings(cls, section) -> "OcmAgentConfig":
        """Creates config from the `ocm_agent` settings section"""
        return cls(
            image=section["image"],
            ocm_base_url=section["ocm_base_url"],
            token_secret=section["token_secret"],
            config_ref=section["config_ref"],
            services=list(section["services"]),
            replicas=int(section["replicas"]),
            name=section["resource_name"],
        )


def make_ocm_agent(config: OcmAgentConfig, namespace: str) -> DesiredResource:
    """Returns desired OcmAgent resource"""
    spec = OcmAgentSpec(
        agentConfig=AgentConfig(ocmBaseUrl=config.ocm_base_url, services=list(config.services)),
        ocmAgentConfig=config.config_ref,
        ocmAgentImage=config.image,
        tokenSecret=config.token_secret,
        replicas=config.replicas,
    )
    return DesiredResource(KIND, API_VERSION, config.name, namespace, spec)
