# pharmacy/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Annotated, List, Literal
from decimal import Decimal
from datetime import datetime


# =====================================================
# INPUT
# =====================================================
class UserRef(BaseModel):
    """Kazde zadanie modyfikujace dane wskazuje uzytkownika przez user_id."""

    user_id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")


class RegisterIn(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class LoginIn(BaseModel):
    """Login przyjmuje nazwe uzytkownika albo email."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class GoogleTokenIn(BaseModel):
    token: str = Field(..., min_length=1)


class GoogleRegisterIn(BaseModel):
    google_id: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    avatar: str | None = None
    email_verified: bool = False


class ProfileUpdateIn(UserRef):
    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    phone: str | None = None


class PasswordChangeIn(UserRef):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class AvatarIn(UserRef):
    avatar: str = Field(..., min_length=1)


# limity zgodne z kolumnami Numeric(10, 2) i Integer
MAX_QUANTITY = 1000
Money = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]


class CartAddIn(UserRef):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, gt=0, le=MAX_QUANTITY, description="Ilość produktu (musi być > 0)")


class CartQuantityIn(UserRef):
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY, description="Ilość nie mniejsza niż 1")


class DeliveryDetailsIn(UserRef):
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str = Field(..., min_length=1, max_length=50)
    delivery_address: str = Field(..., min_length=1)
    customer_notes: str | None = None
    payment_method: str | None = None


class OrderCreateIn(DeliveryDetailsIn):
    """Zamowienie jednego produktu (szybki zakup)."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY)
    total_amount: Money


class CheckoutIn(DeliveryDetailsIn):
    """Zamowienie z calego koszyka."""


class ProductCreateIn(UserRef):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: int = Field(..., gt=0)
    price: Money
    old_price: Money | None = None
    stock_quantity: int = Field(..., ge=0, le=1_000_000)
    description: str = ""
    manufacturer: str = ""
    country: str = ""
    in_stock: bool = False
    is_popular: bool = False
    is_new: bool = False
    composition: str = ""
    indications: str = ""
    usage: str = ""
    contraindications: str = ""
    dosage: str = ""
    expiry_date: str = ""
    storage_conditions: str = ""
    image: str | None = None


CourierStatusValue = Literal["active", "inactive", "busy", "offline"]


class CourierRegisterIn(UserRef):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., min_length=3, max_length=255)
    vehicle_type: str = "bicycle"
    vehicle_number: str = ""


class CourierProfileIn(UserRef):
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    vehicle_type: str | None = None
    vehicle_number: str | None = None


class CourierStatusIn(UserRef):
    status: CourierStatusValue


class CourierOrderActionIn(UserRef):
    order_id: int = Field(..., gt=0)
    reason: str | None = None


class ScheduleEntryIn(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0 = poniedziałek")
    start_time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    end_time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    is_active: bool = True


class ScheduleIn(UserRef):
    schedule: List[ScheduleEntryIn]


class ChatMessageIn(UserRef):
    message: str = Field(..., min_length=1, max_length=4000)


class TelegramMessageIn(BaseModel):
    message: str = Field(..., min_length=1, max_length=3500)
    user_id: int | None = Field(None, gt=0)


# =====================================================
# OUTPUT
# =====================================================
class UserOut(BaseModel):
    """Uzytkownik bez hasla."""

    id: int
    username: str
    email: str
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    middle_name: str | None = None
    phone: str | None = None
    avatar: str | None = None
    google_id: str | None = None
    email_verified: bool = False
    is_admin: bool = False
    login_count: int = 0
    last_login: datetime | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CategoryOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    manufacturer: str | None = None
    country: str | None = None
    price: Decimal
    old_price: Decimal | None = None
    category_id: int | None = None
    category_name: str | None = None
    stock_quantity: int = 0
    in_stock: bool = True
    is_popular: bool = False
    is_new: bool = False
    composition: str | None = None
    indications: str | None = None
    usage: str | None = None
    contraindications: str | None = None
    dosage: str | None = None
    expiry_date: str | None = None
    storage_conditions: str | None = None
    image: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CartItemOut(BaseModel):
    """Schema dla pozycji w koszyku (response)."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CartLineOut(CartItemOut):
    """Pozycja koszyka wzbogacona o aktualne dane produktu."""

    name: str | None = None
    price: Decimal | None = None
    image: str | None = None
    description: str | None = None
    manufacturer: str | None = None
    in_stock: bool | None = None


class OrderItemOut(BaseModel):
    id: int
    product_id: int | None = None
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: int
    order_code: str
    user_id: int
    courier_id: int | None = None
    status: str
    total_amount: Decimal
    delivery_address: str
    customer_name: str
    customer_phone: str
    customer_notes: str | None = None
    payment_method: str | None = None
    created_at: datetime
    assigned_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class CourierProductOut(BaseModel):
    id: int | None = None
    name: str
    quantity: int
    price: Decimal
    total_price: Decimal


class CourierOrderOut(BaseModel):
    """Zamowienie w widoku kuriera."""

    id: int
    order_code: str
    address: str
    status: str
    customer_name: str
    customer_phone: str
    customer_notes: str | None = None
    total_amount: Decimal
    created_at: datetime
    assigned_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    courier_name: str | None = None
    products: List[CourierProductOut] = []


class CourierOut(BaseModel):
    id: int
    user_id: int
    courier_code: str
    first_name: str
    last_name: str
    phone: str
    email: str
    vehicle_type: str
    vehicle_number: str
    status: str
    rating: Decimal
    total_orders: int
    completed_orders: int
    current_daily_orders: int
    daily_goal: int
    total_earnings: Decimal
    today_earnings: Decimal
    last_activity: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    username: str | None = None
    avatar: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CourierMessageOut(BaseModel):
    id: int
    courier_id: int
    subject: str
    message: str
    message_type: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ChatOut(BaseModel):
    id: int
    courier_id: int
    participant_type: str
    participant_name: str
    last_message: str | None = None
    last_message_at: datetime
    unread_count: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ChatMessageOut(BaseModel):
    id: int
    chat_id: int
    sender_type: str
    sender_name: str
    message: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScheduleEntryOut(BaseModel):
    id: int
    courier_id: int
    day_of_week: int
    start_time: str
    end_time: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class EarningsOrderOut(BaseModel):
    id: int
    order_code: str
    total_amount: Decimal
    courier_earnings: Decimal
    delivered_at: datetime | None = None


class EarningsOut(BaseModel):
    period: str
    total_earnings: Decimal
    today_earnings: Decimal
    period_earnings: Decimal
    orders: List[EarningsOrderOut]


# =====================================================
# ENVELOPES {success, ...}
# =====================================================
class Envelope(BaseModel):
    success: bool = True
    message: str | None = None


class UserResponse(Envelope):
    user: UserOut


class GoogleAuthResponse(Envelope):
    user: UserOut
    created: bool = False
    requires_additional_info: bool = False


class AvatarResponse(Envelope):
    avatar_url: str


class CategoriesResponse(Envelope):
    categories: List[CategoryOut]


class ProductResponse(Envelope):
    product: ProductOut


class ProductPageResponse(Envelope):
    products: List[ProductOut]
    total: int
    page: int
    limit: int
    total_pages: int = Field(..., serialization_alias="totalPages")


class CartItemResponse(Envelope):
    item: CartItemOut


class CartResponse(Envelope):
    items: List[CartLineOut]
    total: Decimal


class OrderResponse(Envelope):
    order: OrderOut


class OrderListResponse(Envelope):
    orders: List[OrderOut]


class CourierResponse(Envelope):
    courier: CourierOut


class CourierOrderResponse(Envelope):
    order: CourierOrderOut


class CourierOrderListResponse(Envelope):
    orders: List[CourierOrderOut]


class OrderActionResponse(Envelope):
    order: OrderOut
    courier_name: str | None = None
    earnings: Decimal | None = None


class CourierMessagesResponse(Envelope):
    messages: List[CourierMessageOut]


class ChatsResponse(Envelope):
    chats: List[ChatOut]


class ChatMessagesResponse(Envelope):
    messages: List[ChatMessageOut]


class ChatMessageResponse(Envelope):
    chat_message: ChatMessageOut


class ScheduleResponse(Envelope):
    schedule: List[ScheduleEntryOut]


class EarningsResponse(Envelope):
    earnings: EarningsOut


class TelegramResponse(Envelope):
    demo: bool = False
    queued: bool = False


class ConfigResponse(Envelope):
    google_client_id: str = Field(..., serialization_alias="googleClientId")
