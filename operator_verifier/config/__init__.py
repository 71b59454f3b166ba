"""Module which initializes Dynaconf"""

from dynaconf import Dynaconf, Validator


# pylint: disable=too-few-public-methods
class DefaultValueValidator(Validator):
    """Validator which will run default function only when the original value is missing"""

    def __init__(self, name, default, **kwargs) -> None:
        super().__init__(
            name,
            ne=None,
            messages={"operations": "{name} must {operation} {op_value} but it is {value} in env {env}."},
            default=default,
            when=Validator(name, must_exist=False) | Validator(name, eq=None),
            **kwargs
        )


settings = Dynaconf(
    environments=True,
    lowercase_read=True,
    load_dotenv=True,
    settings_files=["config/settings.yaml", "config/secrets.yaml"],
    envvar_prefix="OPVERIFY",
    merge_enabled=True,
    validators=[
        DefaultValueValidator("polling.interval", default=60, gt=0),
        DefaultValueValidator("polling.deadline", default=120, gt=0),
        DefaultValueValidator("polling.max_consecutive_failures", default=3, gte=0),
        Validator("operator.namespace", must_exist=True, ne=None),
        Validator("operator.name", must_exist=True, ne=None),
        (
            Validator("ocm_agent.image", must_exist=True, ne=None)
            & Validator("ocm_agent.ocm_base_url", must_exist=True, ne=None)
            & Validator("ocm_agent.token_secret", must_exist=True, ne=None)
            & Validator("ocm_agent.config_ref", must_exist=True, ne=None)
            & Validator("ocm_agent.replicas", must_exist=True, gte=0)
        ),
    ],
    validate_only=["polling"],
    loaders=["dynaconf.loaders.env_loader", "operator_verifier.config.openshift_loader"],
)
