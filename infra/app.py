#!/usr/bin/env python3
"""CDK app for the schedule overrides API.

    cdk deploy -c adminKey=... [-c stackName=...] [-c storeName=...]
"""
import os
import aws_cdk as cdk
from stacks.overrides_stack import OverridesStack

app = cdk.App()

stack_name = app.node.try_get_context("stackName") or "ScheduleOverrides"
region = os.getenv("CDK_DEFAULT_REGION", "eu-central-1")

stack = OverridesStack(
    app,
    stack_name,
    env=cdk.Environment(account=os.getenv("CDK_DEFAULT_ACCOUNT"), region=region),
    description="Date-keyed opening-hours overrides (Lambda + DynamoDB)",
)
cdk.Tags.of(stack).add("service", "schedule-overrides")

app.synth()
