#!/usr/bin/env python3
"""
Setup script for the webhook redeployer.
"""

from setuptools import setup, find_packages

# Most configuration is in pyproject.toml
# This file exists for compatibility with older pip versions

setup(
    packages=find_packages(include=["webhook_redeployer", "webhook_redeployer.*"]),
)
