from __future__ import annotations

import logging
from typing import Sequence

from aws_cdk import aws_bedrock as bedrock, aws_iam as iam, aws_s3 as s3
from constructs import Construct

from .action_group import AgentActionGroup
from .assembly import assemble_action_groups
from .assets import ArtifactPublisher, SchemaLocation, actions_require_artifacts, setup_asset_bucket
from .definition import AgentDefinition, AgentDefinitionBuilder
from .environment import DeploymentEnvironment, resolve_environment
from .naming import short_suffix
from .role import BEDROCK_SERVICE_PRINCIPAL, grant_schema_read, synthesize_execution_role
from .schema import SchemaResolver

logger = logging.getLogger(__name__)


class BedrockAgentBlueprintsConstruct(Construct):
    """Bedrock agent plus the bucket, role and permissions its action groups need.

    Construction runs in a fixed order:

    1. decide whether any action group needs a schema upload (asset bucket),
    2. assemble the action groups into the agent definition,
    3. create the agent, synthesizing an execution role if none was given,
    4. allow the agent to invoke each action group's Lambda function,
    5. allow a synthesized role to read each uploaded schema.

    Steps 4 and 5 need the agent ARN / role, so they always run after the
    agent exists. Any error aborts construction.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        agent_definition: AgentDefinition,
        action_groups: Sequence[AgentActionGroup] | None = None,
    ) -> None:
        super().__init__(scope, construct_id)

        action_groups = list(action_groups or [])
        builder = AgentDefinitionBuilder(agent_definition)

        self.agent_service_role: iam.Role | None = None
        self.asset_bucket: s3.Bucket | None = None
        self.schema_locations: tuple[SchemaLocation, ...] = ()

        # Fail before declaring anything if the role can't be built later.
        self._environment: DeploymentEnvironment | None = None
        if not builder.has_role:
            self._environment = resolve_environment()

        publisher = None
        if actions_require_artifacts(action_groups):
            self.asset_bucket = setup_asset_bucket(self)
            publisher = ArtifactPublisher(self, self.asset_bucket)

        assembled = assemble_action_groups(
            builder.action_groups, action_groups, SchemaResolver(publisher)
        )
        builder.set_action_groups(assembled.action_groups)
        self.schema_locations = assembled.schema_locations

        self.agent = self._create_bedrock_agent(builder)

        self._add_resource_policy_for_actions(action_groups)
        self._add_schema_access_for_agent()

    def _create_bedrock_agent(self, builder: AgentDefinitionBuilder) -> bedrock.CfnAgent:
        if not builder.has_role:
            self.agent_service_role = synthesize_execution_role(
                self,
                builder.foundation_model,
                self._environment,
                self.node.path,
                builder.agent_name,
            )
            builder.set_role_arn(self.agent_service_role.role_arn)

        self.agent_definition = builder.build()
        agent = bedrock.CfnAgent(
            self,
            f"AgentBlueprint-{builder.agent_name}",
            **self.agent_definition.to_cfn_props(),
        )
        # Schemas must be in the bucket before Bedrock validates the action groups.
        for location in self.schema_locations:
            if location.deployment is not None:
                agent.node.add_dependency(location.deployment)
        logger.info(
            "Declared Bedrock agent %s with %d action group(s)",
            builder.agent_name,
            len(self.agent_definition.action_groups),
        )
        return agent

    def _add_resource_policy_for_actions(self, action_groups: Sequence[AgentActionGroup]) -> None:
        for action in action_groups:
            if action.lambda_func is None:
                continue
            permission_id = "BedrockAgentInvokePermission-" + short_suffix(
                self.node.path, action.action_group_name
            )
            action.lambda_func.add_permission(
                permission_id,
                action="lambda:InvokeFunction",
                principal=iam.ServicePrincipal(BEDROCK_SERVICE_PRINCIPAL),
                source_arn=self.agent.attr_agent_arn,
            )
            logger.debug("Granted agent invoke on action group %s", action.action_group_name)

    def _add_schema_access_for_agent(self) -> None:
        # A caller-supplied role is the caller's to manage.
        if self.agent_service_role is None:
            return
        for location in self.schema_locations:
            grant_schema_read(self.agent_service_role, location, self._environment)
        if self.schema_locations:
            logger.info(
                "Granted execution role read access to %d schema object(s)",
                len(self.schema_locations),
            )
