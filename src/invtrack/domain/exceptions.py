"""Errors raised by the inventory domain.

The view controller turns a ValidationError from the form into a warning
for the user and keeps the draft. The CLI commands convert any other
DomainException, such as an EntityNotFoundError for an unknown product id
passed to ``product edit``, into a ``click.ClickException``. Store and
network failures are not wrapped here and propagate unchanged.
"""


class DomainException(Exception):
    """Base class for inventory errors shown to the user."""


class ValidationError(DomainException):
    """Form input or a stored record does not make a valid product."""


class EntityNotFoundError(DomainException):
    """No product with the requested id is in the mirrored list."""
