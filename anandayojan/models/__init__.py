from .auth import (
    AuthResponse,
    GoogleAuthRequest,
    IdentityUser,
    LoginRequest,
    MeResponse,
    SignupRequest,
    User,
    UserOut
)
from .booking import (
    Booking,
    BookingActionResponse,
    BookingCancelResponse,
    BookingCreate,
    BookingCreateResponse,
    BookingFeedback,
    BookingList,
    BookingOut,
    BookingStatus,
    CustomerContact,
    FeedbackCreate,
    PaymentStatus,
    RefundStatus
)
from .order import (
    CartItem,
    Order,
    OrderCreate,
    OrderCreateResponse,
    OrderList,
    OrderPaymentStatus,
    OrderStatus
)
from .payment import GatewayOrder, PaymentVerify, PaymentVerifyResponse, WebhookAck

__all__ = [
    'AuthResponse', 'GoogleAuthRequest', 'IdentityUser', 'LoginRequest', 'MeResponse',
    'SignupRequest', 'User', 'UserOut',
    'Booking', 'BookingActionResponse', 'BookingCancelResponse', 'BookingCreate',
    'BookingCreateResponse', 'BookingFeedback', 'BookingList', 'BookingOut', 'BookingStatus',
    'CustomerContact', 'FeedbackCreate', 'PaymentStatus', 'RefundStatus',
    'CartItem', 'Order', 'OrderCreate', 'OrderCreateResponse', 'OrderList',
    'OrderPaymentStatus', 'OrderStatus',
    'GatewayOrder', 'PaymentVerify', 'PaymentVerifyResponse', 'WebhookAck'
]
