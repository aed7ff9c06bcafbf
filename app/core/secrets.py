"""
app/core/secrets.py

Purpose: Secret bootstrap from AWS Secrets Manager

- Fetches the bot's JSON secret once at startup
- Copies known keys into os.environ so Settings can pick them up
- Any failure here is fatal to the process
"""

import json
import os
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.exceptions import ConfigurationError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Secret keys copied into the environment
SECRET_KEYS = (
    "AWS_REGION",
    "SNS_TOPIC_ARN",
    "MONGODB_URL",
    "MONGODB_DB_NAME",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_WHATSAPP_NUMBER",
    "ADMIN_TOKEN",
)


def fetch_secret(secret_id: str, region: str, client=None) -> Dict[str, str]:
    """
    Reads a JSON secret string from Secrets Manager.

    Raises:
        ConfigurationError: If the secret cannot be read or is not a JSON object
    """
    client = client or boto3.client("secretsmanager", region_name=region)

    try:
        response = client.get_secret_value(SecretId=secret_id)
    except (ClientError, BotoCoreError) as e:
        logger.critical(f"Error fetching secret {secret_id}: {e}")
        raise ConfigurationError(f"Could not fetch secret {secret_id}") from e

    secret_string = response.get("SecretString")
    if not secret_string:
        raise ConfigurationError(f"Secret {secret_id} has no SecretString")

    try:
        secrets = json.loads(secret_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Secret {secret_id} is not valid JSON") from e

    if not isinstance(secrets, dict):
        raise ConfigurationError(f"Secret {secret_id} must be a JSON object")

    return secrets


def load_secrets_into_environment(secret_id: Optional[str], region: str, client=None) -> int:
    """
    Overlays secret values onto os.environ.

    Args:
        secret_id: Secrets Manager id; nothing is loaded when empty
        region: AWS region for the Secrets Manager client
        client: Optional pre-built boto3 client

    Returns:
        Number of keys copied into the environment
    """
    if not secret_id:
        logger.info("No AWS_SECRET_ID configured, using environment as-is")
        return 0

    secrets = fetch_secret(secret_id, region, client=client)

    loaded = 0
    for key in SECRET_KEYS:
        value = secrets.get(key)
        if value:
            os.environ[key] = str(value)
            loaded += 1

    logger.info(f"Loaded {loaded} values from secret {secret_id}")
    return loaded
