from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from aws_cdk import aws_bedrock as bedrock

from .action_group import InvalidSchemaError, SchemaDefinition
from .assets import ArtifactPublisher, SchemaLocation

logger = logging.getLogger(__name__)


def schema_file_name(action_group_name: str) -> str:
    return f"OpenAPISchema_{action_group_name}.json"


@dataclass(frozen=True)
class ResolvedSchema:
    api_schema: bedrock.CfnAgent.APISchemaProperty | None = None
    function_schema: Any = None
    location: SchemaLocation | None = None

    def as_fragment_kwargs(self) -> dict[str, Any]:
        if self.api_schema is not None:
            return {"api_schema": self.api_schema}
        return {"function_schema": self.function_schema}


class SchemaResolver:
    """Turns a ``SchemaDefinition`` into the agent's API/function schema fields.

    Only file schemas have side effects: the file is published to the asset
    bucket and the resulting S3 location is returned alongside the schema.
    """

    def __init__(self, publisher: ArtifactPublisher | None = None) -> None:
        self._publisher = publisher

    def resolve(self, schema: SchemaDefinition, action_group_name: str) -> ResolvedSchema:
        if schema.inline_api_schema:
            payload = schema.inline_api_schema
            if not isinstance(payload, str):
                payload = json.dumps(payload)
            return ResolvedSchema(api_schema=bedrock.CfnAgent.APISchemaProperty(payload=payload))

        if schema.api_schema_file:
            if self._publisher is None:
                raise RuntimeError(
                    f"action group {action_group_name!r} has a schema file but no asset bucket was set up"
                )
            location = self._publisher.publish(
                {schema_file_name(action_group_name): schema.api_schema_file},
                action_group_name,
            )
            logger.debug(
                "Schema for action group %s published to %s", action_group_name, location.object_key
            )
            return ResolvedSchema(
                api_schema=bedrock.CfnAgent.APISchemaProperty(
                    s3=bedrock.CfnAgent.S3IdentifierProperty(
                        s3_bucket_name=location.bucket_name,
                        s3_object_key=location.object_key,
                    )
                ),
                location=location,
            )

        if schema.function_schema:
            return ResolvedSchema(function_schema=schema.function_schema)

        raise InvalidSchemaError(
            f"action group {action_group_name!r}: no schema representation supplied"
        )
