from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Sequence, Union

from playground.events import DialogEvent, EventChannel

logger = logging.getLogger(__name__)

Message = Union[str, Sequence[str]]


def _join(message: Message) -> str:
    if isinstance(message, str):
        return message
    return "\n".join(message)


class Notification:
    """Asks the UI for dialogs through the event channel and keeps a message log."""

    def __init__(self, channel: EventChannel) -> None:
        self._channel = channel
        self._errors: List[str] = []
        self._infos: List[str] = []

    @property
    def errors(self) -> List[str]:
        return list(self._errors)

    @property
    def infos(self) -> List[str]:
        return list(self._infos)

    async def alert(self, message: str, title: str = "Alert", primary: str = "Ok", secondary: str = "Cancel") -> bool:
        """Show a two-button dialog; True when the primary action is picked."""
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        actions: Dict[str, Any] = {
            primary: lambda _action: self._resolve(future, True),
            secondary: lambda _action: self._resolve(future, False),
        }
        self._channel.publish(DialogEvent(title=title or "Alert", message=message, actions=actions))
        return await future

    async def confirm(self, message: str, title: str = "Alert", *actions: str) -> str:
        """Show a dialog with the given action labels; resolves to the label picked."""
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        dialog_actions = {label: (lambda action, _label=label: self._resolve(future, action or _label)) for label in actions}
        self._channel.publish(DialogEvent(title=title or "Alert", message=message, actions=dialog_actions))
        return await future

    def error(self, message: Message) -> str:
        text = _join(message)
        self._errors.append(text)
        logger.error(text)
        return text

    def info(self, message: Message) -> str:
        text = _join(message)
        self._infos.append(text)
        logger.info(text)
        return text

    @staticmethod
    def _resolve(future: asyncio.Future, value: Any) -> None:
        # A dialog may fire more than one action; the first one wins.
        if not future.done():
            future.set_result(value)
