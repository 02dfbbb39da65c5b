"""
Local Storage Interface

Durable mirror of the cart entry and the contact info. Two independent records;
the in-process copy held by the state machine is authoritative.
"""

from abc import ABC, abstractmethod

from src.service.cinema.domain.value_object.cart_entry import CartEntry
from src.service.cinema.domain.value_object.contact_info import ContactInfo


class ILocalStorage(ABC):
    @abstractmethod
    def load_cart(self) -> CartEntry | None:
        pass

    @abstractmethod
    def save_cart(self, *, cart: CartEntry) -> None:
        pass

    @abstractmethod
    def delete_cart(self) -> None:
        """Remove the cart record. Safe to call when none exists."""
        pass

    @abstractmethod
    def load_contact(self) -> ContactInfo | None:
        pass

    @abstractmethod
    def save_contact(self, *, contact: ContactInfo) -> None:
        pass

    @abstractmethod
    def delete_contact(self) -> None:
        """Remove the contact record. Safe to call when none exists."""
        pass
