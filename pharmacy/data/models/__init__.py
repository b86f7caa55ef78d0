#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from pharmacy.data.models.user import UserModel
from pharmacy.data.models.category import CategoryModel
from pharmacy.data.models.product import ProductModel
from pharmacy.data.models.cart_item import CartItemModel
from pharmacy.data.models.courier import CourierModel
from pharmacy.data.models.order import DeliveryOrderModel
from pharmacy.data.models.order_item import DeliveryOrderItemModel
from pharmacy.data.models.courier_message import CourierMessageModel
from pharmacy.data.models.courier_chat import CourierChatModel, CourierChatMessageModel
from pharmacy.data.models.courier_schedule import CourierScheduleModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "CartItemModel",
    "CourierModel",
    "DeliveryOrderModel",
    "DeliveryOrderItemModel",
    "CourierMessageModel",
    "CourierChatModel",
    "CourierChatMessageModel",
    "CourierScheduleModel",
]
