import os
from pathlib import Path

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from bedrock_blueprints import (
    AgentActionGroup,
    AgentDefinition,
    BedrockAgentBlueprintsConstruct,
    SchemaDefinition,
)

DEFAULT_FOUNDATION_MODEL = "anthropic.claude-3-haiku-20240307-v1:0"
DEFAULT_INSTRUCTION = (
    "You are a helpful assistant. Answer questions using the action groups "
    "available to you and ask for clarification when a request is ambiguous."
)


def _idle_ttl_from_env() -> int | None:
    raw = (os.getenv("BLUEPRINT_IDLE_TTL_SECONDS") or "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError("BLUEPRINT_IDLE_TTL_SECONDS must be an integer number of seconds") from None
    if value <= 0:
        raise ValueError("BLUEPRINT_IDLE_TTL_SECONDS must be positive")
    return value


def action_groups_from_env() -> list[AgentActionGroup]:
    schema_file = (os.getenv("BLUEPRINT_SCHEMA_FILE") or "").strip()
    if not schema_file:
        return []
    path = Path(schema_file)
    if not path.is_file():
        raise ValueError(f"BLUEPRINT_SCHEMA_FILE does not exist: {schema_file}")
    # No backing function here: the caller handles the returned control.
    return [
        AgentActionGroup(
            action_group_name=(os.getenv("BLUEPRINT_ACTION_GROUP_NAME") or "").strip() or "api",
            description=f"Actions described by {path.name}",
            schema_definition=SchemaDefinition.from_file(path),
        )
    ]


def agent_definition_from_env(construct_id: str) -> AgentDefinition:
    return AgentDefinition(
        agent_name=(os.getenv("BLUEPRINT_AGENT_NAME") or "").strip() or f"{construct_id}-agent",
        foundation_model=(os.getenv("BLUEPRINT_FOUNDATION_MODEL") or "").strip()
        or DEFAULT_FOUNDATION_MODEL,
        agent_resource_role_arn=(os.getenv("BLUEPRINT_AGENT_ROLE_ARN") or "").strip() or None,
        instruction=(os.getenv("BLUEPRINT_INSTRUCTION") or "").strip() or DEFAULT_INSTRUCTION,
        idle_session_ttl_in_seconds=_idle_ttl_from_env(),
        auto_prepare=True,
    )


class AgentBlueprintStack(Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        agent_definition: AgentDefinition | None = None,
        action_groups: list[AgentActionGroup] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        if agent_definition is None:
            agent_definition = agent_definition_from_env(construct_id)
        if action_groups is None:
            action_groups = action_groups_from_env()

        blueprint = BedrockAgentBlueprintsConstruct(
            self,
            "AgentBlueprint",
            agent_definition=agent_definition,
            action_groups=action_groups,
        )
        self.blueprint = blueprint

        CfnOutput(
            self,
            "AgentArn",
            value=blueprint.agent.attr_agent_arn,
        )

        CfnOutput(
            self,
            "AgentId",
            value=blueprint.agent.attr_agent_id,
        )

        if blueprint.agent_service_role is not None:
            CfnOutput(
                self,
                "AgentServiceRoleArn",
                value=blueprint.agent_service_role.role_arn,
                description="Execution role created for the agent.",
            )

        if blueprint.asset_bucket is not None:
            CfnOutput(
                self,
                "AssetBucketName",
                value=blueprint.asset_bucket.bucket_name,
            )
