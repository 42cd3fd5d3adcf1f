from abc import ABC, abstractmethod


class NotificationError(Exception):
    """Delivery of an outbound message failed"""


class Notifier(ABC):
    """Outbound message delivery - application layer"""

    @abstractmethod
    async def send(self, address: str, subject: str, body: str) -> None:
        """
        Deliver a message.

        Raises:
            NotificationError: delivery was rejected or the transport failed
        """
        pass
