from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping

from aws_cdk import aws_bedrock as bedrock


class DefinitionFinalizedError(RuntimeError):
    """Raised when an agent definition is changed after the agent was created."""


MODELLED_PROPS = frozenset(
    {
        "agent_name",
        "foundation_model",
        "agent_resource_role_arn",
        "instruction",
        "description",
        "idle_session_ttl_in_seconds",
        "auto_prepare",
        "action_groups",
    }
)


@dataclass(frozen=True)
class AgentDefinition:
    """Caller-facing template for the ``AWS::Bedrock::Agent`` resource.

    ``extra_props`` is passed through to ``CfnAgent`` for properties not
    modelled here (prompt overrides, customer encryption key, ...).
    """

    agent_name: str
    foundation_model: str
    agent_resource_role_arn: str | None = None
    instruction: str | None = None
    description: str | None = None
    idle_session_ttl_in_seconds: int | None = None
    auto_prepare: bool | None = None
    action_groups: tuple[bedrock.CfnAgent.AgentActionGroupProperty, ...] = ()
    extra_props: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not (self.agent_name or "").strip():
            raise ValueError("agent_name is required")
        if not (self.foundation_model or "").strip():
            raise ValueError("foundation_model is required")
        clashing = sorted(MODELLED_PROPS.intersection(self.extra_props or {}))
        if clashing:
            raise ValueError(
                "extra_props may not set modelled agent properties: " + ", ".join(clashing)
            )
        object.__setattr__(self, "action_groups", tuple(self.action_groups or ()))

    def to_cfn_props(self) -> dict[str, Any]:
        props: dict[str, Any] = dict(self.extra_props)
        props.update(
            agent_name=self.agent_name,
            foundation_model=self.foundation_model,
            agent_resource_role_arn=self.agent_resource_role_arn,
            instruction=self.instruction,
            description=self.description,
            idle_session_ttl_in_seconds=self.idle_session_ttl_in_seconds,
            auto_prepare=self.auto_prepare,
            action_groups=list(self.action_groups) or None,
        )
        return {k: v for k, v in props.items() if v is not None}


class AgentDefinitionBuilder:
    """Accumulates action groups and the execution role for one agent.

    ``build()`` finalizes the builder; any later change raises
    ``DefinitionFinalizedError`` since the agent has already been declared.
    """

    def __init__(self, template: AgentDefinition) -> None:
        self._template = template
        self._action_groups = list(template.action_groups)
        self._role_arn = template.agent_resource_role_arn
        self._final: AgentDefinition | None = None

    @property
    def agent_name(self) -> str:
        return self._template.agent_name

    @property
    def foundation_model(self) -> str:
        return self._template.foundation_model

    @property
    def has_role(self) -> bool:
        return bool(self._role_arn)

    @property
    def action_groups(self) -> tuple[bedrock.CfnAgent.AgentActionGroupProperty, ...]:
        return tuple(self._action_groups)

    @property
    def finalized(self) -> bool:
        return self._final is not None

    def _ensure_open(self) -> None:
        if self._final is not None:
            raise DefinitionFinalizedError(
                f"agent definition {self.agent_name!r} is final; changes need a new deployment"
            )

    def set_action_groups(
        self, action_groups: Iterable[bedrock.CfnAgent.AgentActionGroupProperty]
    ) -> None:
        self._ensure_open()
        self._action_groups = list(action_groups)

    def set_role_arn(self, role_arn: str) -> None:
        self._ensure_open()
        self._role_arn = role_arn

    def build(self) -> AgentDefinition:
        self._ensure_open()
        self._final = replace(
            self._template,
            agent_resource_role_arn=self._role_arn,
            action_groups=tuple(self._action_groups),
        )
        return self._final
