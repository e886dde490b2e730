"""
Fire-and-forget back-office notifications over a Discord webhook.
"""

import logging
import threading

import discord

from config import NOTIFY_USERNAME, NOTIFY_WEBHOOK_URL
from utils.embeds import create_bet_embed, create_settlement_embed, create_transaction_embed

logger = logging.getLogger("huay.services.notification")


class NotificationService:
    """
    Posts embeds to a webhook on a daemon thread.

    Delivery problems are logged at WARNING and never reach the caller: the
    financial operation that triggered a notification has already committed.
    With no webhook URL configured every call is a no-op.
    """

    def __init__(
        self,
        webhook_url: str | None = NOTIFY_WEBHOOK_URL,
        username: str = NOTIFY_USERNAME,
        run_async: bool = True,
    ):
        self.webhook_url = webhook_url
        self.username = username
        self.run_async = run_async

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def notify_transaction(self, event: str, username: str, transaction: dict) -> None:
        self._dispatch(event, create_transaction_embed, event, username, transaction)

    def notify_bets_placed(self, username: str, bets: list, total: float) -> None:
        self._dispatch("bet_placed", create_bet_embed, username, bets, total)

    def notify_draw_settled(self, draw, summary) -> None:
        self._dispatch("draw_settled", create_settlement_embed, draw, summary)

    def _dispatch(self, event: str, build_embed, *args) -> None:
        if not self.enabled:
            logger.debug(f"Notifications disabled; dropping {event}")
            return
        if self.run_async:
            thread = threading.Thread(
                target=self._deliver,
                args=(event, build_embed, args),
                name=f"notify-{event}",
                daemon=True,
            )
            try:
                thread.start()
            except RuntimeError as exc:
                logger.warning(f"Failed to start delivery of {event} notification: {exc}")
        else:
            self._deliver(event, build_embed, args)

    def _deliver(self, event: str, build_embed, args: tuple) -> None:
        try:
            embed = build_embed(*args)
            webhook = discord.SyncWebhook.from_url(self.webhook_url)
            webhook.send(embed=embed, username=self.username)
        except Exception as exc:
            logger.warning(f"Failed to deliver {event} notification: {exc}")
