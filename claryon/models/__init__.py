from claryon.models.admin import Admin
from claryon.models.appointment import Appointment, AppointmentStatus
from claryon.models.blog_post import BlogPost, BlogPostStatus, BodyContentType
from claryon.models.testimonial import Testimonial
from claryon.models.contact_submission import ContactSubmission

__all__ = [
    "Admin",
    "Appointment",
    "AppointmentStatus",
    "BlogPost",
    "BlogPostStatus",
    "BodyContentType",
    "Testimonial",
    "ContactSubmission",
]
