from claryon.schemas.admin import (
    AdminLogin,
    AdminLoginResponse,
    AdminResponse,
    TokenData,
)
from claryon.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentBookedResponse,
    AppointmentListResponse,
)
from claryon.schemas.calendar_event import (
    CalendarEventRequest,
    DirectBookingRequest,
    CalendarEventResponse,
    CalendarErrorResponse,
    CalendarPartialFailureResponse,
)
from claryon.schemas.blog import (
    BlogPostCreate,
    BlogPostUpdate,
    BlogPostSummary,
    BlogPostResponse,
    BlogPostListResponse,
)
from claryon.schemas.testimonial import (
    TestimonialCreate,
    TestimonialUpdate,
    TestimonialResponse,
    PublicTestimonialResponse,
)
from claryon.schemas.contact import (
    ContactSubmissionCreate,
    ContactSubmissionResponse,
    ContactSubmissionReceipt,
)

__all__ = [
    "AdminLogin",
    "AdminLoginResponse",
    "AdminResponse",
    "TokenData",
    "AppointmentCreate",
    "AppointmentResponse",
    "AppointmentBookedResponse",
    "AppointmentListResponse",
    "CalendarEventRequest",
    "DirectBookingRequest",
    "CalendarEventResponse",
    "CalendarErrorResponse",
    "CalendarPartialFailureResponse",
    "BlogPostCreate",
    "BlogPostUpdate",
    "BlogPostSummary",
    "BlogPostResponse",
    "BlogPostListResponse",
    "TestimonialCreate",
    "TestimonialUpdate",
    "TestimonialResponse",
    "PublicTestimonialResponse",
    "ContactSubmissionCreate",
    "ContactSubmissionResponse",
    "ContactSubmissionReceipt",
]
