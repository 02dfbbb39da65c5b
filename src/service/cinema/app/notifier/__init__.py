from src.service.cinema.app.notifier.change_event import ChangeEvent, Subscription
from src.service.cinema.app.notifier.change_notifier import ChangeNotifier, HandlerFailure

__all__ = ['ChangeEvent', 'ChangeNotifier', 'HandlerFailure', 'Subscription']
