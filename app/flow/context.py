"""
app/flow/context.py

Purpose: Collaborators shared by the flow handlers

Built once at startup and passed into every handler call, so handlers never
reach for module-level clients.
"""

from dataclasses import dataclass
from typing import Optional

from app.services.interfaces import ConversationGateway, Notifier, QuoteSource, RecordStore
from utils.constants import REPLY_TIMEOUT_SECONDS


@dataclass
class FlowContext:
    store: RecordStore
    notifier: Notifier
    quotes: QuoteSource
    gateway: ConversationGateway
    topic_arn: Optional[str]
    reply_timeout: float = REPLY_TIMEOUT_SECONDS
