"""Supra Schemas - Pydantic models for backend API data contracts."""

from supra_schemas.audit import (
    AuditFilter,
    AuditLog,
    AuditOperation,
    AuditStatistics,
)
from supra_schemas.auth import (
    DEFAULT_ROLE_ID,
    ROLE_IDS,
    AuthResponse,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    RegisterResponse,
    Role,
    SessionUser,
    UserCreate,
    UserSummary,
    UserUpdate,
)
from supra_schemas.cart import AddToCartRequest, Cart, CartItem, UpdateCartItemRequest
from supra_schemas.health import (
    DatabaseDump,
    DatabaseHealth,
    DatabaseInfo,
    HealthStatus,
)
from supra_schemas.menu import (
    MenuCategory,
    MenuFilter,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    MenuPage,
    MenuSortField,
    SortOrder,
)
from supra_schemas.orders import Order, OrderCreate, OrderItem, OrderType, UserAddress
from supra_schemas.reports import (
    OccupancyRow,
    ReportKind,
    ReportRange,
    SalesByDay,
    UserVisitsRow,
)
from supra_schemas.reservations import (
    ACTIVE_STATUSES,
    BookedReservation,
    OccupiedSlot,
    Reservation,
    ReservationCreate,
    ReservationForUserCreate,
    ReservationStatus,
    TableAvailability,
)
from supra_schemas.restaurant import WEEKDAYS, Restaurant, RestaurantFilter, Table
from supra_schemas.reviews import (
    MIN_REVIEW_TEXT_LENGTH,
    Review,
    ReviewCreate,
    ReviewFilter,
    ReviewPage,
    ReviewSortField,
    ReviewStats,
    ReviewUpdate,
)

__all__ = [
    # Auth
    "AuthResponse",
    "DEFAULT_ROLE_ID",
    "LoginRequest",
    "PasswordChange",
    "ProfileUpdate",
    "RegisterRequest",
    "RegisterResponse",
    "ROLE_IDS",
    "Role",
    "SessionUser",
    "UserCreate",
    "UserSummary",
    "UserUpdate",
    # Restaurants
    "Restaurant",
    "RestaurantFilter",
    "Table",
    "WEEKDAYS",
    # Menu
    "MenuCategory",
    "MenuFilter",
    "MenuItem",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuPage",
    "MenuSortField",
    "SortOrder",
    # Cart
    "AddToCartRequest",
    "Cart",
    "CartItem",
    "UpdateCartItemRequest",
    # Orders
    "Order",
    "OrderCreate",
    "OrderItem",
    "OrderType",
    "UserAddress",
    # Reservations
    "ACTIVE_STATUSES",
    "BookedReservation",
    "OccupiedSlot",
    "Reservation",
    "ReservationCreate",
    "ReservationForUserCreate",
    "ReservationStatus",
    "TableAvailability",
    # Reviews
    "MIN_REVIEW_TEXT_LENGTH",
    "Review",
    "ReviewCreate",
    "ReviewFilter",
    "ReviewPage",
    "ReviewSortField",
    "ReviewStats",
    "ReviewUpdate",
    # Audit
    "AuditFilter",
    "AuditLog",
    "AuditOperation",
    "AuditStatistics",
    # Reports
    "OccupancyRow",
    "ReportKind",
    "ReportRange",
    "SalesByDay",
    "UserVisitsRow",
    # Health
    "DatabaseDump",
    "DatabaseHealth",
    "DatabaseInfo",
    "HealthStatus",
]
