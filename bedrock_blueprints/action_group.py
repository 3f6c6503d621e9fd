from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from aws_cdk import aws_bedrock as bedrock, aws_lambda as _lambda

ACTION_GROUP_STATES = {"ENABLED", "DISABLED"}
RETURN_CONTROL = "RETURN_CONTROL"


class InvalidSchemaError(ValueError):
    """Raised when an action group does not carry exactly one schema representation."""


@dataclass(frozen=True)
class SchemaDefinition:
    """API or function schema for one action group.

    Exactly one of the three fields must be set:

    - ``inline_api_schema``: OpenAPI document embedded in the agent definition.
      Strings are used verbatim; mappings are rendered as JSON.
    - ``api_schema_file``: raw OpenAPI bytes, uploaded to the asset bucket.
    - ``function_schema``: a ``CfnAgent.FunctionSchemaProperty`` (or the
      equivalent mapping), no upload needed.

    Errors raised here cannot name the action group; ``AgentActionGroup``
    adds the group name when it builds the definition from a mapping. A
    prebuilt instance has already passed these checks.
    """

    inline_api_schema: str | Mapping[str, Any] | None = None
    api_schema_file: bytes | None = None
    function_schema: bedrock.CfnAgent.FunctionSchemaProperty | Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        populated = [
            name
            for name, value in (
                ("inline_api_schema", self.inline_api_schema),
                ("api_schema_file", self.api_schema_file),
                ("function_schema", self.function_schema),
            )
            if value
        ]
        if not populated:
            raise InvalidSchemaError(
                "OpenAPI schema or function schema required for creating action group"
            )
        if len(populated) > 1:
            raise InvalidSchemaError(
                "only one schema representation may be set, got: " + ", ".join(populated)
            )
        if self.api_schema_file is not None and not isinstance(
            self.api_schema_file, (bytes, bytearray)
        ):
            raise InvalidSchemaError("api_schema_file must be bytes")

    @classmethod
    def from_file(cls, path: str | Path) -> "SchemaDefinition":
        return cls(api_schema_file=Path(path).read_bytes())

    @property
    def kind(self) -> str:
        if self.inline_api_schema:
            return "inline"
        if self.api_schema_file:
            return "file"
        return "function"


class AgentActionGroup:
    """One capability the agent can call.

    ``lambda_func`` is the backing function. Without one, the action group is
    caller-orchestrated and uses ``custom_control`` (``RETURN_CONTROL``).
    """

    def __init__(
        self,
        *,
        action_group_name: str,
        schema_definition: SchemaDefinition | Mapping[str, Any],
        description: str | None = None,
        action_group_state: str = "ENABLED",
        lambda_func: _lambda.IFunction | None = None,
        custom_control: str | None = None,
    ) -> None:
        action_group_name = (action_group_name or "").strip()
        if not action_group_name:
            raise ValueError("action_group_name is required")

        if not isinstance(schema_definition, SchemaDefinition):
            try:
                schema_definition = SchemaDefinition(**dict(schema_definition))
            except InvalidSchemaError as e:
                raise InvalidSchemaError(f"action group {action_group_name!r}: {e}") from e
            except TypeError as e:
                raise InvalidSchemaError(
                    f"action group {action_group_name!r}: unknown schema field ({e})"
                ) from e

        state = (action_group_state or "").strip().upper()
        if state not in ACTION_GROUP_STATES:
            raise ValueError(
                f"action group {action_group_name!r}: action_group_state must be "
                "'ENABLED' or 'DISABLED'"
            )

        if lambda_func is not None and custom_control:
            raise ValueError(
                f"action group {action_group_name!r}: set lambda_func or custom_control, not both"
            )

        self.action_group_name = action_group_name
        self.schema_definition = schema_definition
        self.description = description
        self.action_group_state = state
        self.lambda_func = lambda_func
        self.custom_control = custom_control

    @property
    def requires_artifacts(self) -> bool:
        return self.schema_definition.kind == "file"

    def get_action_executor(self) -> bedrock.CfnAgent.ActionGroupExecutorProperty:
        if self.lambda_func is not None:
            return bedrock.CfnAgent.ActionGroupExecutorProperty(
                lambda_=self.lambda_func.function_arn
            )
        return bedrock.CfnAgent.ActionGroupExecutorProperty(
            custom_control=self.custom_control or RETURN_CONTROL
        )

    def __repr__(self) -> str:
        return (
            f"AgentActionGroup(action_group_name={self.action_group_name!r}, "
            f"schema={self.schema_definition.kind!r})"
        )
