from enum import StrEnum


class ChangeKind(StrEnum):
    """Closed set of change events published by the booking state machine"""

    CATALOGUE_CHANGED = 'catalogue-changed'
    SELECTION_CHANGED = 'selection-changed'
    CART_CHANGED = 'cart-changed'
    ORDER_COMPLETED = 'order-completed'
