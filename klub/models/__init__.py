from klub.models.restaurants import Restaurant
from klub.models.profiles import Profile
from klub.models.qr_codes import QRCode
from klub.models.menu_items import MenuItem
from klub.models.bills import Bill
from klub.models.bill_items import BillItem
from klub.models.participants import Participant
from klub.models.item_assignments import ItemAssignment
from klub.models.payments import Payment

__all__ = [
    "Restaurant",
    "Profile",
    "QRCode",
    "MenuItem",
    "Bill",
    "BillItem",
    "Participant",
    "ItemAssignment",
    "Payment",
]
