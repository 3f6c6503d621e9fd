from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from aws_cdk import aws_bedrock as bedrock

from .action_group import AgentActionGroup
from .assets import SchemaLocation
from .schema import SchemaResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssembledActionGroups:
    action_groups: tuple[bedrock.CfnAgent.AgentActionGroupProperty, ...]
    schema_locations: tuple[SchemaLocation, ...]


def build_action_group(
    action: AgentActionGroup, resolver: SchemaResolver
) -> tuple[bedrock.CfnAgent.AgentActionGroupProperty, SchemaLocation | None]:
    resolved = resolver.resolve(action.schema_definition, action.action_group_name)
    fragment = bedrock.CfnAgent.AgentActionGroupProperty(
        action_group_name=action.action_group_name,
        action_group_executor=action.get_action_executor(),
        description=action.description,
        action_group_state=action.action_group_state,
        **resolved.as_fragment_kwargs(),
    )
    return fragment, resolved.location


def assemble_action_groups(
    existing: Sequence[bedrock.CfnAgent.AgentActionGroupProperty],
    action_groups: Iterable[AgentActionGroup] | None,
    resolver: SchemaResolver,
) -> AssembledActionGroups:
    """Append one agent action group per ``AgentActionGroup``, in input order, to ``existing``."""
    fragments = list(existing)
    locations: list[SchemaLocation] = []
    for action in action_groups or []:
        fragment, location = build_action_group(action, resolver)
        fragments.append(fragment)
        if location is not None:
            locations.append(location)
        logger.debug(
            "Assembled action group %s (schema=%s)",
            action.action_group_name,
            action.schema_definition.kind,
        )
    return AssembledActionGroups(
        action_groups=tuple(fragments), schema_locations=tuple(locations)
    )
