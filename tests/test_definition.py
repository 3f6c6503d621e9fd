import sys
from pathlib import Path

import pytest
from aws_cdk import aws_bedrock as bedrock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bedrock_blueprints.action_group import AgentActionGroup, SchemaDefinition
from bedrock_blueprints.assembly import assemble_action_groups
from bedrock_blueprints.definition import (
    AgentDefinition,
    AgentDefinitionBuilder,
    DefinitionFinalizedError,
)
from bedrock_blueprints.schema import SchemaResolver

MODEL = "anthropic.claude-3-haiku-20240307-v1:0"


def _group(name: str) -> AgentActionGroup:
    return AgentActionGroup(
        action_group_name=name,
        schema_definition=SchemaDefinition(inline_api_schema=f'{{"title": "{name}"}}'),
        description=f"{name} actions",
    )


def test_definition_requires_name_and_model():
    with pytest.raises(ValueError, match="agent_name"):
        AgentDefinition(agent_name="", foundation_model=MODEL)
    with pytest.raises(ValueError, match="foundation_model"):
        AgentDefinition(agent_name="agent", foundation_model=" ")


def test_to_cfn_props_drops_unset_values_and_keeps_extras():
    definition = AgentDefinition(
        agent_name="agent",
        foundation_model=MODEL,
        instruction="Help customers track their orders and answer shipping questions.",
        extra_props={"customer_encryption_key_arn": "arn:aws:kms:us-east-1:123456789012:key/abc"},
    )
    props = definition.to_cfn_props()
    assert props == {
        "agent_name": "agent",
        "foundation_model": MODEL,
        "instruction": "Help customers track their orders and answer shipping questions.",
        "customer_encryption_key_arn": "arn:aws:kms:us-east-1:123456789012:key/abc",
    }


def test_builder_is_final_after_build():
    builder = AgentDefinitionBuilder(AgentDefinition(agent_name="agent", foundation_model=MODEL))
    assert builder.has_role is False
    builder.set_role_arn("arn:aws:iam::123456789012:role/AgentRole")
    final = builder.build()

    assert final.agent_resource_role_arn == "arn:aws:iam::123456789012:role/AgentRole"
    assert builder.finalized is True
    with pytest.raises(DefinitionFinalizedError):
        builder.set_role_arn("arn:aws:iam::123456789012:role/Other")
    with pytest.raises(DefinitionFinalizedError):
        builder.set_action_groups([])
    with pytest.raises(DefinitionFinalizedError):
        builder.build()


def test_assembly_preserves_order_and_appends_to_existing():
    existing = bedrock.CfnAgent.AgentActionGroupProperty(
        action_group_name="UserInputAction",
        parent_action_group_signature="AMAZON.UserInput",
    )
    specs = [_group("alpha"), _group("beta"), _group("gamma")]

    assembled = assemble_action_groups([existing], specs, SchemaResolver())

    assert [g.action_group_name for g in assembled.action_groups] == [
        "UserInputAction",
        "alpha",
        "beta",
        "gamma",
    ]
    beta = assembled.action_groups[2]
    assert beta.description == "beta actions"
    assert beta.action_group_state == "ENABLED"
    assert beta.api_schema.payload == '{"title": "beta"}'
    assert beta.action_group_executor.custom_control == "RETURN_CONTROL"
    assert assembled.schema_locations == ()
    assert [s.action_group_name for s in specs] == ["alpha", "beta", "gamma"]


def test_assembly_with_no_specs_returns_existing():
    assembled = assemble_action_groups([], None, SchemaResolver())
    assert assembled.action_groups == ()


def test_extra_props_cannot_shadow_modelled_properties():
    with pytest.raises(ValueError, match="action_groups, agent_resource_role_arn"):
        AgentDefinition(
            agent_name="agent",
            foundation_model=MODEL,
            extra_props={
                "agent_resource_role_arn": "arn:aws:iam::123456789012:role/AgentRole",
                "action_groups": [],
            },
        )
