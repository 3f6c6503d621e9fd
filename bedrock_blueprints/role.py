from __future__ import annotations

import logging

from aws_cdk import aws_iam as iam
from constructs import Construct

from .assets import SchemaLocation
from .environment import DeploymentEnvironment
from .naming import short_suffix

logger = logging.getLogger(__name__)

BEDROCK_SERVICE_PRINCIPAL = "bedrock.amazonaws.com"
ROLE_NAME_PREFIX = "AmazonBedrockExecutionRoleForAgents_"


def foundation_model_arn(region: str, foundation_model: str) -> str:
    if foundation_model.startswith("arn:"):
        return foundation_model
    return f"arn:aws:bedrock:{region}::foundation-model/{foundation_model}"


def synthesize_execution_role(
    scope: Construct,
    foundation_model: str,
    environment: DeploymentEnvironment,
    *name_parts: str,
) -> iam.Role:
    """Create the service role the agent assumes at runtime.

    Only Bedrock in this account may assume it, and it starts with a single
    grant: ``bedrock:InvokeModel`` on the selected foundation model.
    """
    role = iam.Role(
        scope,
        "BedrockServiceRole",
        assumed_by=iam.ServicePrincipal(
            BEDROCK_SERVICE_PRINCIPAL,
            conditions={
                "StringEquals": {
                    "aws:SourceAccount": environment.account_id,
                },
            },
        ),
        # Role names are unique per account, not per region.
        role_name=ROLE_NAME_PREFIX
        + short_suffix(
            environment.account_id,
            environment.region,
            *(name_parts or (scope.node.path,)),
        ),
        description="Service role for Amazon Bedrock",
    )
    role.add_to_policy(
        iam.PolicyStatement(
            sid="AllowModelInvocationForOrchestration",
            effect=iam.Effect.ALLOW,
            actions=["bedrock:InvokeModel"],
            resources=[foundation_model_arn(environment.region, foundation_model)],
        )
    )
    logger.info("Synthesized execution role for foundation model %s", foundation_model)
    return role


def grant_schema_read(
    role: iam.Role, location: SchemaLocation, environment: DeploymentEnvironment
) -> None:
    # Sids must be unique within the role's default policy.
    role.add_to_policy(
        iam.PolicyStatement(
            sid="AllowAccessToActionGroupAPISchemas" + short_suffix(location.object_key),
            effect=iam.Effect.ALLOW,
            actions=["s3:GetObject"],
            resources=[location.object_arn],
            conditions={
                "StringEquals": {
                    "aws:ResourceAccount": environment.account_id,
                },
            },
        )
    )
