"""hassbridge - route local smart-home intents to Home Assistant webhooks."""

from loguru import logger

__version__ = "1.0.0"
__logo__ = "🏠"

logger.disable("hassbridge")
