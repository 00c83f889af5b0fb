import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from cardulary.errors import InvalidSubmissionLinkError, RateLimitedError, ValidationError
from cardulary.guests.features.submit_address.dtos import (
    AddressResponse,
    SubmissionInfoResponse,
    SubmissionResponse,
    SubmitAddressRequest,
    SubmitAddressResponse,
)
from cardulary.guests.features.submit_address.validation import RawAddress
from cardulary.guests.features.submit_address.write_model import (
    AddressSubmissionWriteModel,
    SqlAddressSubmissionWriteModel,
)
from cardulary.guests.repository.read_models import SqlSubmissionReadModel, SubmissionReadModel
from cardulary.guests.urls import GET_SUBMISSION_INFO_URL, SUBMIT_ADDRESS_URL
from cardulary.rate_limit import RATE_LIMITS, RateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter()


def get_submission_write_model() -> AddressSubmissionWriteModel:
    """Dependency to get address submission write model instance."""
    return SqlAddressSubmissionWriteModel()


def get_submission_read_model() -> SubmissionReadModel:
    """Dependency to get submission read model instance."""
    return SqlSubmissionReadModel()


def get_client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


@router.get(GET_SUBMISSION_INFO_URL, response_model=SubmissionInfoResponse)
async def get_submission_info(
    token: str,
    read_model: SubmissionReadModel = Depends(get_submission_read_model),
) -> SubmissionInfoResponse:
    """
    Get what the address form needs to render for a token.
    Includes the current address so a returning guest can edit it.
    """
    info = await read_model.get_submission_info(token)
    if not info:
        raise HTTPException(status_code=404, detail=InvalidSubmissionLinkError.public_message)

    return SubmissionInfoResponse(
        guest_first_name=info.guest_first_name,
        event_name=info.event_name,
        status=info.status,
        custom_message=info.custom_message,
        current_address=(
            AddressResponse.from_dto(info.current_address) if info.current_address else None
        ),
    )


@router.post(SUBMIT_ADDRESS_URL, response_model=SubmitAddressResponse, status_code=201)
async def submit_address(
    body: SubmitAddressRequest,
    request: Request,
    write_model: AddressSubmissionWriteModel = Depends(get_submission_write_model),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> SubmitAddressResponse:
    """
    Store the guest's mailing address.

    Re-submitting replaces the current address; earlier ones are kept as history.
    """
    ip_address = get_client_ip(request)

    try:
        await rate_limiter.enforce(f"submit:{ip_address}", RATE_LIMITS["submit"])
    except RateLimitedError as e:
        logger.info(f"Submission rate limit hit for {ip_address}")
        raise HTTPException(
            status_code=429,
            detail=e.message,
            headers={
                "Retry-After": str(e.retry_after),
                "X-RateLimit-Limit": str(e.limit),
                "X-RateLimit-Remaining": "0",
            },
        )

    raw_address = RawAddress(
        address_line1=body.address_line1,
        address_line2=body.address_line2,
        city=body.city,
        state=body.state,
        zip=body.zip,
        country=body.country,
    )
    try:
        submission = await write_model.submit_address(
            token=body.token,
            raw_address=raw_address,
            ip_address=ip_address,
        )
    except InvalidSubmissionLinkError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return SubmitAddressResponse(
        message="Address submitted successfully",
        submission=SubmissionResponse.from_submission(submission),
    )
