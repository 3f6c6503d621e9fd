from __future__ import annotations

import os
from dataclasses import dataclass

CDK_DEFAULT_REGION = "CDK_DEFAULT_REGION"
CDK_DEFAULT_ACCOUNT = "CDK_DEFAULT_ACCOUNT"
AWS_REGION = "AWS_REGION"


class MissingEnvironmentError(ValueError):
    """Raised when the target region or account cannot be determined."""


@dataclass(frozen=True)
class DeploymentEnvironment:
    region: str
    account_id: str


def _env_or_none(*names: str) -> str | None:
    for n in names:
        v = (os.environ.get(n) or "").strip()
        if v:
            return v
    return None


def resolve_environment() -> DeploymentEnvironment:
    """Read the deployment region and account from the process environment.

    The CDK CLI exports ``CDK_DEFAULT_REGION``/``CDK_DEFAULT_ACCOUNT`` for the
    app it runs; ``AWS_REGION`` is accepted as a region fallback.
    """
    region = _env_or_none(CDK_DEFAULT_REGION, AWS_REGION)
    account_id = _env_or_none(CDK_DEFAULT_ACCOUNT)
    missing = []
    if not region:
        missing.append(f"{CDK_DEFAULT_REGION} (or {AWS_REGION})")
    if not account_id:
        missing.append(CDK_DEFAULT_ACCOUNT)
    if missing:
        raise MissingEnvironmentError(
            "Cannot create the agent execution role without a target environment; set "
            + " and ".join(missing)
            + ", or pass agent_resource_role_arn in the agent definition."
        )
    return DeploymentEnvironment(region=region, account_id=account_id)
