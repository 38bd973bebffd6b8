"""Domain errors for the ticketing module."""

from core.domain.errors import ConflictError, ErrorCode, NotFoundError, ValidationError


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class PerformanceNotFoundError(NotFoundError):
    """Raised when a performance is missing or belongs to another event."""

    def __init__(self, performance_id: str) -> None:
        super().__init__(
            code=ErrorCode.PERFORMANCE_NOT_FOUND,
            message="Performance not found for event",
            field="performance_id",
        )
        self.performance_id = performance_id


class TicketTypeNotFoundError(NotFoundError):
    """Raised when a ticket type is missing or belongs to another event."""

    def __init__(self, ticket_type_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_TYPE_NOT_FOUND,
            message="Ticket type not found for event",
            field="items",
        )
        self.ticket_type_id = ticket_type_id


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__(code=ErrorCode.ORDER_NOT_FOUND, message="Order not found")
        self.order_id = order_id


class TicketNotFoundError(NotFoundError):
    def __init__(self, code: str) -> None:
        super().__init__(code=ErrorCode.TICKET_NOT_FOUND, message="Ticket not found")
        self.redemption_code = code


class SaleLinkNotFoundError(NotFoundError):
    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.SALE_LINK_NOT_FOUND,
            message="Sale link not found for event",
            field="sale_link_code",
        )
        self.sale_link_code = code


class EmptyOrderError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMPTY_ORDER,
            message="An order needs at least one ticket",
            field="items",
        )


class EventWithoutEnsembleError(ValidationError):
    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_WITHOUT_ENSEMBLE,
            message="Event is not linked to an ensemble",
        )
        self.event_id = event_id


class SoldOutError(ConflictError):
    def __init__(self, performance_id: str, remaining: int) -> None:
        super().__init__(
            code=ErrorCode.SOLD_OUT,
            message=f"Only {remaining} tickets remain for this performance",
        )
        self.performance_id = performance_id
        self.remaining = remaining


class AlreadyCheckedInError(ConflictError):
    def __init__(self, code: str) -> None:
        super().__init__(code=ErrorCode.ALREADY_CHECKED_IN, message="Ticket already checked in")
        self.redemption_code = code


class EventHasOrdersError(ConflictError):
    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_HAS_ORDERS,
            message="Events with orders cannot be deleted",
        )
        self.event_id = event_id
