# infra/stacks/overrides_stack.py

import os

from aws_cdk import (
    Stack,
    Duration,
    RemovalPolicy,
    CfnOutput,
    aws_lambda as _lambda,
    aws_apigateway as apigw,
    aws_dynamodb as dynamodb,
)
from constructs import Construct


class OverridesStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =========
        # Context
        # =========
        store_name = self.node.try_get_context("storeName") or "overrides"
        # Shared secret for writes; left unset the API answers writes with 500
        admin_key = self.node.try_get_context("adminKey") or os.getenv("ADMIN_KEY", "")

        # =========
        # DynamoDB
        # =========
        table = dynamodb.Table(
            self,
            "OverridesTable",
            partition_key=dynamodb.Attribute(name="pk", type=dynamodb.AttributeType.STRING),
            sort_key=dynamodb.Attribute(name="sk", type=dynamodb.AttributeType.STRING),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            point_in_time_recovery=True,
            removal_policy=RemovalPolicy.RETAIN,
        )

        # =============
        # Lambda (API)
        # =============
        environment = {
            "TABLE_NAME": table.table_name,
            "STORE_NAME": store_name,
            "LOG_LEVEL": "INFO",
        }
        if admin_key:
            environment["ADMIN_KEY"] = admin_key

        api_lambda = _lambda.Function(
            self,
            "OverridesLambda",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="app.handler",
            code=_lambda.Code.from_asset("../backend/handler"),
            memory_size=256,
            timeout=Duration.seconds(10),
            environment=environment,
        )
        table.grant_read_write_data(api_lambda)

        # ===========
        # API Gateway
        # ===========
        # OPTIONS is proxied too; the function answers preflight itself
        api = apigw.LambdaRestApi(
            self,
            "Api",
            handler=api_lambda,
            proxy=True,
            deploy_options=apigw.StageOptions(
                stage_name="prod",
                throttling_rate_limit=50,
                throttling_burst_limit=100,
            ),
        )

        # =======
        # Outputs
        # =======
        CfnOutput(self, "TableName", value=table.table_name)
        CfnOutput(self, "ApiUrl", value=api.url)
