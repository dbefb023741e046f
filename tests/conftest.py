"""
Pytest configuration and fixtures for webhook redeployer tests.
"""

import json

import pytest
from unittest.mock import Mock, patch

TRUSTED_CALLBACK_URL = (
    "https://registry.hub.docker.com/u/jfbrandhorst/grpcweb-example/hook/2141b5bi5i5b02bec211i4eeih0242eg11000a/"
)


@pytest.fixture
def mock_docker_client():
    """Mock Docker client for tests."""
    with patch("docker.from_env") as mock_docker:
        client = Mock()
        mock_docker.return_value = client
        yield client


@pytest.fixture
def webhook_payload():
    """Docker Hub webhook payload as sent for a push to the trusted repository."""
    return {
        "push_data": {
            "pushed_at": 1417566161,
            "images": ["27d47432a69bca5f2700e4dff7de0388ed65f9d3fb1ec645e2bc24c223dc1cc3"],
            "tag": "latest",
            "pusher": "jfbrandhorst",
        },
        "callback_url": TRUSTED_CALLBACK_URL,
        "repository": {
            "status": "Active",
            "description": "gRPC-Web example",
            "is_trusted": True,
            "full_description": "",
            "repo_url": "https://registry.hub.docker.com/u/jfbrandhorst/grpcweb-example/",
            "owner": "jfbrandhorst",
            "is_official": False,
            "is_private": False,
            "name": "grpcweb-example",
            "namespace": "jfbrandhorst",
            "star_count": 2,
            "comment_count": 0,
            "date_created": 1370174400,
            "repo_name": "jfbrandhorst/grpcweb-example",
        },
    }


@pytest.fixture
def webhook_body(webhook_payload):
    """Serialized trusted webhook payload."""
    return json.dumps(webhook_payload).encode()
