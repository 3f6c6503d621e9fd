import sys
from pathlib import Path

import pytest
from aws_cdk import App, Stack
from aws_cdk import aws_lambda as _lambda

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bedrock_blueprints.action_group import AgentActionGroup, InvalidSchemaError, SchemaDefinition


def test_schema_definition_requires_one_representation():
    with pytest.raises(InvalidSchemaError, match="required"):
        SchemaDefinition()


def test_schema_definition_rejects_multiple_representations():
    with pytest.raises(InvalidSchemaError, match="inline_api_schema, api_schema_file"):
        SchemaDefinition(inline_api_schema="{}", api_schema_file=b"openapi")


def test_schema_definition_rejects_non_bytes_file():
    with pytest.raises(InvalidSchemaError, match="bytes"):
        SchemaDefinition(api_schema_file="openapi: 3.0.0")


def test_schema_definition_kind():
    assert SchemaDefinition(inline_api_schema="{}").kind == "inline"
    assert SchemaDefinition(api_schema_file=b"x").kind == "file"
    assert SchemaDefinition(function_schema={"functions": [{"name": "f"}]}).kind == "function"


def test_schema_definition_from_file(tmp_path):
    schema = tmp_path / "orders.yaml"
    schema.write_bytes(b"openapi: 3.0.0\n")
    assert SchemaDefinition.from_file(schema).api_schema_file == b"openapi: 3.0.0\n"


def test_action_group_accepts_schema_mapping():
    action = AgentActionGroup(
        action_group_name="ping",
        schema_definition={"inline_api_schema": '{"type":"inline"}'},
    )
    assert action.schema_definition.kind == "inline"
    assert action.requires_artifacts is False


def test_action_group_error_names_the_group():
    with pytest.raises(InvalidSchemaError, match="'orders'.*only one"):
        AgentActionGroup(
            action_group_name="orders",
            schema_definition={"inline_api_schema": "{}", "api_schema_file": b"x"},
        )


def test_action_group_state_is_validated_and_normalized():
    action = AgentActionGroup(
        action_group_name="ping",
        schema_definition=SchemaDefinition(inline_api_schema="{}"),
        action_group_state="disabled",
    )
    assert action.action_group_state == "DISABLED"

    with pytest.raises(ValueError, match="action_group_state"):
        AgentActionGroup(
            action_group_name="ping",
            schema_definition=SchemaDefinition(inline_api_schema="{}"),
            action_group_state="PAUSED",
        )


def test_action_group_name_is_required():
    with pytest.raises(ValueError, match="action_group_name"):
        AgentActionGroup(
            action_group_name="  ",
            schema_definition=SchemaDefinition(inline_api_schema="{}"),
        )


def test_executor_defaults_to_return_control_without_function():
    action = AgentActionGroup(
        action_group_name="ping",
        schema_definition=SchemaDefinition(inline_api_schema="{}"),
    )
    executor = action.get_action_executor()
    assert executor.custom_control == "RETURN_CONTROL"
    assert executor.lambda_ is None


def test_executor_uses_function_arn():
    stack = Stack(App(), "ActionGroupExecutorStack")
    fn = _lambda.Function(
        stack,
        "Handler",
        runtime=_lambda.Runtime.PYTHON_3_12,
        handler="index.handler",
        code=_lambda.Code.from_inline("def handler(event, context):\n    return {}\n"),
    )
    action = AgentActionGroup(
        action_group_name="ping",
        schema_definition=SchemaDefinition(inline_api_schema="{}"),
        lambda_func=fn,
    )
    executor = action.get_action_executor()
    assert executor.lambda_ == fn.function_arn
    assert executor.custom_control is None


def test_function_and_custom_control_are_exclusive():
    stack = Stack(App(), "ActionGroupExclusiveStack")
    fn = _lambda.Function(
        stack,
        "Handler",
        runtime=_lambda.Runtime.PYTHON_3_12,
        handler="index.handler",
        code=_lambda.Code.from_inline("def handler(event, context):\n    return {}\n"),
    )
    with pytest.raises(ValueError, match="not both"):
        AgentActionGroup(
            action_group_name="ping",
            schema_definition=SchemaDefinition(inline_api_schema="{}"),
            lambda_func=fn,
            custom_control="RETURN_CONTROL",
        )


def test_unknown_schema_field_names_the_group():
    with pytest.raises(InvalidSchemaError, match="'orders'.*unknown schema field"):
        AgentActionGroup(
            action_group_name="orders",
            schema_definition={"openapi_yaml": "openapi: 3.0.0"},
        )
