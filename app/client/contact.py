# app/client/contact.py
import re

from sqlmodel import SQLModel

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\d\s\-\+\(\)]+$")


class ContactForm(SQLModel):
    """
    Contact page form. Messages are only acknowledged on the page.
    """

    name: str = ""
    email: str = ""
    phone: str = ""
    message: str = ""

    def validate_form(self) -> str | None:
        """
        Return the first validation error message, or None when valid.
        """
        if not (self.name and self.email and self.phone and self.message):
            return "Please fill in all fields"
        if not EMAIL_RE.match(self.email):
            return "Please enter a valid email address"
        if not PHONE_RE.match(self.phone):
            return "Please enter a valid phone number"
        return None

    def submit(self) -> tuple[bool, str]:
        """
        Validate and, on success, reset the form.

        Returns (ok, message to show).
        """
        error = self.validate_form()
        if error:
            return False, error
        self.name = self.email = self.phone = self.message = ""
        return True, "Thank you for your message! We'll get back to you soon."
