"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages
- Command prefixes
- Fixed timings

(Prevents hardcoding across the codebase)
"""

# ============================================================
# COMMANDS
# ============================================================

COMMAND_INSPIRE = "!inspire"
COMMAND_SUBSCRIBE = "!subscribe"
COMMAND_UNSUBSCRIBE = "!unsubscribe"

# How long a subscribe prompt waits for the phone number reply
REPLY_TIMEOUT_SECONDS = 60

# ============================================================
# INSPIRE
# ============================================================

QUOTE_SMS_SENT_MESSAGE = "Your inspirational quote has been sent to your phone!"

INSPIRE_ERROR_MESSAGE = (
    "Something went wrong while fetching your inspirational quote. "
    "Please try again later."
)

# ============================================================
# SUBSCRIBE
# ============================================================

ASK_PHONE_NUMBER_MESSAGE = "Please reply with your phone number to subscribe to SMS notifications:"

SUBSCRIPTION_PENDING_MESSAGE = (
    "Thank you! A confirmation message has been sent to your phone. "
    "Please reply to confirm your subscription."
)

SUBSCRIBE_ERROR_MESSAGE = "There was an error subscribing your phone number. Please try again."

# ============================================================
# UNSUBSCRIBE
# ============================================================

UNSUBSCRIBED_MESSAGE = "Your phone number has been unsubscribed from SMS notifications."

NOT_SUBSCRIBED_MESSAGE = "You are not subscribed to SMS notifications."

UNSUBSCRIBE_ERROR_MESSAGE = "There was an error unsubscribing your phone number. Please try again."
