from travel_agency.models.destination import Destination
from travel_agency.models.package import Package
from travel_agency.models.customer import Customer
from travel_agency.models.booking import Booking, BookingStatus

__all__ = ["Destination", "Package", "Customer", "Booking", "BookingStatus"]
