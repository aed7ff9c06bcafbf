"""
app/services/notification_service.py

Purpose: SMS delivery through AWS SNS

- Publishes one-off SMS messages to a phone number
- Subscribes phone numbers to the quote topic (SNS sends the carrier
  confirmation SMS itself)
- boto3 is blocking, so calls run in a worker thread
"""

import asyncio
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.exceptions import DeliveryRejectedError
from app.core.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Thin async wrapper over the SNS client."""

    def __init__(self, region: str, client=None):
        self._client = client or boto3.client("sns", region_name=region)

    async def send(self, phone_number: str, text: str) -> str:
        """
        Publishes an SMS directly to a phone number.

        Returns:
            SNS MessageId

        Raises:
            DeliveryRejectedError: If SNS rejects the publish
        """
        try:
            response = await asyncio.to_thread(
                self._client.publish,
                PhoneNumber=phone_number,
                Message=text,
            )
        except (ClientError, BotoCoreError, ValueError) as e:
            logger.error(f"Could not publish to phone number {phone_number}: {e}")
            raise DeliveryRejectedError(f"SMS publish rejected for {phone_number}") from e

        message_id = response["MessageId"]
        logger.info(f"Message published to phone number {phone_number} with message Id - {message_id}")
        return message_id

    async def subscribe(self, phone_number: str, topic_arn: Optional[str]) -> str:
        """
        Subscribes a phone number to an SNS topic over the sms protocol.

        Returns:
            SubscriptionArn ("pending confirmation" until the user replies
            to the carrier SMS)

        Raises:
            DeliveryRejectedError: If the topic is missing or SNS rejects the number
        """
        if not topic_arn:
            raise DeliveryRejectedError("SNS topic ARN is not configured")

        try:
            response = await asyncio.to_thread(
                self._client.subscribe,
                TopicArn=topic_arn,
                Protocol="sms",
                Endpoint=phone_number,
                ReturnSubscriptionArn=False,
            )
        except (ClientError, BotoCoreError, ValueError) as e:
            logger.error(f"Error subscribing phone number {phone_number}: {e}")
            raise DeliveryRejectedError(f"SNS subscribe rejected for {phone_number}") from e

        subscription_arn = response.get("SubscriptionArn", "")
        logger.info(f"Subscribed {phone_number} to {topic_arn} ({subscription_arn})")
        return subscription_arn
