"""Binding controllers: document, query and form."""

from pydocbind.binding._base import BindingController, ErrorReporter, log_error
from pydocbind.binding.document import DocumentController
from pydocbind.binding.form import FormController
from pydocbind.binding.query import QueryController

__all__ = [
    "BindingController",
    "DocumentController",
    "ErrorReporter",
    "FormController",
    "QueryController",
    "log_error",
]
