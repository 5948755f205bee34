# ABOUTME: Gateway package: source adapter contracts, HTTP capability, and concrete sources.
# ABOUTME: Exports the three gateway shapes and every bundled bibliographic or holdings source.

from biblioenrich.gateways.base import (
    BulkGateway,
    CollectionGateway,
    GatewayDescriptor,
    GatewayShape,
    SingleGateway,
)
from biblioenrich.gateways.cinii import CiNiiGateway
from biblioenrich.gateways.google_books import GoogleBooksGateway
from biblioenrich.gateways.http import BiblioHttpClient, HttpClient, HttpResponse, SourceFetchError
from biblioenrich.gateways.isbndb import ISBNdbGateway
from biblioenrich.gateways.kinokuniya import KinokuniyaGateway
from biblioenrich.gateways.mathlib import LazyCatalog, MathLibCatalogGateway
from biblioenrich.gateways.ndl import NDLGateway
from biblioenrich.gateways.openbd import OpenBDGateway
from biblioenrich.gateways.routing import RegionRoutedGateway

__all__ = [
    "BiblioHttpClient",
    "BulkGateway",
    "CiNiiGateway",
    "CollectionGateway",
    "GatewayDescriptor",
    "GatewayShape",
    "GoogleBooksGateway",
    "HttpClient",
    "HttpResponse",
    "ISBNdbGateway",
    "KinokuniyaGateway",
    "LazyCatalog",
    "MathLibCatalogGateway",
    "NDLGateway",
    "OpenBDGateway",
    "RegionRoutedGateway",
    "SingleGateway",
    "SourceFetchError",
]
