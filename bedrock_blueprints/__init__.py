"""CDK constructs for assembling Amazon Bedrock agents from blueprints.

The main entry point is ``BedrockAgentBlueprintsConstruct``, which turns an
agent definition and a list of action groups into an ``AWS::Bedrock::Agent``
plus the bucket, role and permissions those action groups need.
"""

from .action_group import AgentActionGroup, InvalidSchemaError, SchemaDefinition
from .agent import BedrockAgentBlueprintsConstruct
from .definition import AgentDefinition, AgentDefinitionBuilder, DefinitionFinalizedError
from .environment import DeploymentEnvironment, MissingEnvironmentError

__all__ = [
    "AgentActionGroup",
    "AgentDefinition",
    "AgentDefinitionBuilder",
    "BedrockAgentBlueprintsConstruct",
    "DefinitionFinalizedError",
    "DeploymentEnvironment",
    "InvalidSchemaError",
    "MissingEnvironmentError",
    "SchemaDefinition",
    "__version__",
]

__version__ = "0.1.0"
