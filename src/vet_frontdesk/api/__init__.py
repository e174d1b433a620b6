"""
REST client for the clinic backend.
"""

from .appointments import AppointmentsApi
from .client import (
    DELETE_FAILED,
    REQUEST_FAILED,
    ApiClient,
    TokenSource,
    extract_detail,
    parse_many,
    parse_one,
)
from .clients import ClientsApi
from .consultations import ConsultationsApi
from .invoices import InvoicesApi
from .pets import PetsApi
from .sequencing import RequestSequencer, Ticket
from .treatments import TreatmentsApi
from .users import AuthApi, UsersApi

__all__ = [
    "ApiClient",
    "TokenSource",
    "REQUEST_FAILED",
    "DELETE_FAILED",
    "extract_detail",
    "parse_one",
    "parse_many",
    "AppointmentsApi",
    "ClientsApi",
    "PetsApi",
    "ConsultationsApi",
    "InvoicesApi",
    "TreatmentsApi",
    "UsersApi",
    "AuthApi",
    "RequestSequencer",
    "Ticket",
]
