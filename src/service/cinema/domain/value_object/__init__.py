from src.service.cinema.domain.value_object.cart_entry import CartEntry
from src.service.cinema.domain.value_object.contact_info import ContactInfo
from src.service.cinema.domain.value_object.order_result import OrderResult
from src.service.cinema.domain.value_object.selection import Selection

__all__ = ['CartEntry', 'ContactInfo', 'OrderResult', 'Selection']
