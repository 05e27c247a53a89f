"""Database layer"""

from .connection import create_supabase_client, get_supabase_client
from .repositories import (
    TableRepository,
    EstimateRepository,
    CustomerRepository,
    PartnerRepository,
    AdminRepository,
)

__all__ = [
    "create_supabase_client",
    "get_supabase_client",
    "TableRepository",
    "EstimateRepository",
    "CustomerRepository",
    "PartnerRepository",
    "AdminRepository",
]
