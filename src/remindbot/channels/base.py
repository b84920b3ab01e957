from abc import ABC, abstractmethod

__all__ = ["DeliverySink"]


class DeliverySink(ABC):
    """Outbound side of a chat transport. Delivery is best-effort."""

    @abstractmethod
    async def send_message(self, recipient_id: str, text: str) -> None:
        pass
