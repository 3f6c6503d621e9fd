#!/usr/bin/env python3
import logging
import os

import aws_cdk as cdk

from stacks.agent_blueprint_stack import AgentBlueprintStack

logging.basicConfig(
    level=os.getenv("BLUEPRINT_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
    format="%(levelname)s %(name)s: %(message)s",
)

app = cdk.App()

stack_name = os.getenv("CDK_STACK_NAME", "AgentBlueprintStack")

AgentBlueprintStack(
    app,
    stack_name,
    env=cdk.Environment(
        account=os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=os.getenv("CDK_DEFAULT_REGION", "us-east-1"),
    ),
)

app.synth()
