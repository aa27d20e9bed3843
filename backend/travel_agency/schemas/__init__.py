from travel_agency.schemas.destination import DestinationCreate, DestinationUpdate, DestinationResponse
from travel_agency.schemas.package import PackageCreate, PackageUpdate, PackageResponse, PackageListResponse
from travel_agency.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from travel_agency.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from travel_agency.schemas.cart import CartItemAdd, CartResponse, CheckoutRequest, CheckoutResponse
from travel_agency.schemas.enrichment import PriceQuote, WeatherWindow, PublicHoliday, CountrySnapshot

__all__ = [
    "DestinationCreate", "DestinationUpdate", "DestinationResponse",
    "PackageCreate", "PackageUpdate", "PackageResponse", "PackageListResponse",
    "CustomerCreate", "CustomerUpdate", "CustomerResponse",
    "BookingCreate", "BookingResponse", "BookingStatusUpdate",
    "CartItemAdd", "CartResponse", "CheckoutRequest", "CheckoutResponse",
    "PriceQuote", "WeatherWindow", "PublicHoliday", "CountrySnapshot",
]
