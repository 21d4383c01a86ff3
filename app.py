#!/usr/bin/env python3
"""
Tiered VPC CDK Application

Creates a dual-stack AWS VPC with public, protected and private subnets in
each availability zone, an Internet Gateway, an Egress-Only Internet Gateway
and a public route table.

The environment block of config.yaml to deploy is chosen with the
DEPLOY_ENVIRONMENT variable (default: DEV).
"""
import sys

from tiered_vpc_cdk.main import main

sys.exit(main())
