from fastapi import APIRouter

from .features.create_event.router import router as create_event_router
from .features.create_guest.router import router as create_guest_router
from .features.list_events.router import router as list_events_router
from .features.list_guests.router import router as list_guests_router
from .features.send_requests.router import router as send_requests_router
from .features.submit_address.router import router as submit_address_router

router = APIRouter()

router.include_router(create_event_router)
router.include_router(list_events_router)
router.include_router(create_guest_router)
router.include_router(list_guests_router)
router.include_router(send_requests_router)
router.include_router(submit_address_router)
