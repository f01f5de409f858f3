"""
CheckoutPipeline — cart plus contact data in, one enquiry out.

Submission is a two-step saga: post the enquiry, then clear the cart.
Nothing local changes until the enquiry is accepted, so a failed submit
leaves the cart exactly as it was.
"""

from __future__ import annotations

import logging
from typing import Any

from kungfu import Result, Ok, Error, Option, LazyCoroResult

from doorstep import pricing as P
from doorstep import saga as S
from doorstep._types import Json
from doorstep.address import AddressResolver, Locality
from doorstep.api import ApiError, EnquiryBackend, to_api_error
from doorstep.cart import CartItem, CartStore, Notice, NoticeLevel, NoticeSink
from doorstep.catalog import Category, CatalogItem
from doorstep.checkout._types import (
    CheckoutForm,
    Enquiry,
    ServiceEnquiry,
    Confirmation,
    CheckoutError,
    CheckoutErrorKind,
)
from doorstep.checkout._validate import (
    SERVICE_ENQUIRY_FIELDS,
    missing_fields,
    can_submit,
    describe_missing,
)

logger = logging.getLogger(__name__)

SUBMIT_FAILED = "Failed to submit enquiry"


def _enquiry_id(ack: Any) -> str | None:
    if not isinstance(ack, dict):
        return None
    nested = ack.get("enquiry")
    source = nested if isinstance(nested, dict) else ack
    for key in ("_id", "id"):
        value = source.get(key)
        if value is not None:
            return str(value)
    return None


class CheckoutPipeline:
    """
    Address completion, gating and submission for the checkout view.

    Reads the cart, never mutates it except through CartStore.clear() after
    a successful submission.

    Example:
        pipeline = CheckoutPipeline(store, client, AddressResolver(limit=8))
        form = await pipeline.prefill(CheckoutForm())
        form = pipeline.select_locality(form, pipeline.suggest_cities("nan")[0])
        match await pipeline.submit(form):
            case Ok(confirmation): ...
            case Error(e): ...
    """

    def __init__(
        self,
        cart: CartStore,
        backend: EnquiryBackend,
        resolver: AddressResolver,
        notify: NoticeSink | None = None,
    ) -> None:
        self._cart = cart
        self._backend = backend
        self._resolver = resolver
        self._notify = notify
        self._submitting = False

    @property
    def submitting(self) -> bool:
        return self._submitting

    def _publish(self, level: NoticeLevel, message: str) -> None:
        if self._notify is not None:
            self._notify(Notice(level, message))

    # ─────────────────────────────────────────────────────────────────────────
    # Address
    # ─────────────────────────────────────────────────────────────────────────

    def suggest_cities(self, fragment: str) -> tuple[Locality, ...]:
        return self._resolver.by_city(fragment)

    def lookup_pincode(self, code: str) -> Option[Locality]:
        return self._resolver.by_pincode(code)

    def select_locality(self, form: CheckoutForm, locality: Locality) -> CheckoutForm:
        return form.with_locality(locality)

    def complete_pincode(self, form: CheckoutForm) -> CheckoutForm:
        """Fill city and state once the pincode field holds a known code."""
        return self._resolver.by_pincode(form.pincode).map(form.with_locality).unwrap_or(form)

    async def prefill(self, form: CheckoutForm) -> CheckoutForm:
        """Fill blanks from the customer profile. A failed fetch keeps the form."""
        match await self._backend.profile():
            case Ok(profile):
                return form.prefilled(profile)
            case Error(e):
                logger.info("Profile unavailable for prefill: %s", e.message)
                return form

    # ─────────────────────────────────────────────────────────────────────────
    # Gating
    # ─────────────────────────────────────────────────────────────────────────

    def can_submit(self, form: CheckoutForm) -> bool:
        return not self._submitting and can_submit(self._cart.items, form)

    def _reject[T](
        self,
        kind: CheckoutErrorKind,
        message: str,
        fields: tuple[str, ...] = (),
    ) -> Result[T, CheckoutError]:
        logger.debug("Checkout rejected: %s", kind.name)
        return Error(CheckoutError(kind, message, fields))

    def _precheck(
        self,
        form: CheckoutForm,
        required: tuple[str, ...] | None = None,
        needs_items: bool = True,
    ) -> Result[tuple[CartItem, ...], CheckoutError]:
        if self._submitting:
            return self._reject(CheckoutErrorKind.BUSY, "Submission already in progress")
        if self._cart.identity is None:
            return self._reject(CheckoutErrorKind.UNAUTHENTICATED, "Please login to submit an enquiry")
        items = self._cart.items
        if needs_items and not items:
            return self._reject(CheckoutErrorKind.EMPTY_CART, "Your cart is empty")
        missing = missing_fields(form) if required is None else missing_fields(form, required)
        if missing:
            return self._reject(CheckoutErrorKind.MISSING_FIELDS, describe_missing(missing), missing)
        if needs_items and self._cart.syncing:
            return self._reject(CheckoutErrorKind.BUSY, "Cart is updating, please wait")
        return Ok(items)

    # ─────────────────────────────────────────────────────────────────────────
    # Submission
    # ─────────────────────────────────────────────────────────────────────────

    def _post(self, payload: Json) -> LazyCoroResult[Json, ApiError]:
        """Post while holding the cart, so no line changes under the snapshot."""
        async def post() -> Result[Json, ApiError]:
            with self._cart.hold():
                return await self._backend.submit_enquiry(payload)

        return LazyCoroResult(post)

    def _clear_cart(self, ack: Json) -> S.SagaStep[tuple[Json, bool], ApiError]:
        """Never fails on a refused clear: it is reported, not rolled back."""
        async def clear() -> tuple[Json, bool]:
            match await self._cart.clear():
                case Ok(_):
                    return ack, True
                case Error(e):
                    logger.warning("Enquiry submitted but cart was not cleared: %s", e.message)
                    return ack, False

        return S.from_async(clear, on_error=lambda exc: to_api_error(exc, "clear_cart"))

    async def submit(self, form: CheckoutForm) -> Result[Confirmation, CheckoutError]:
        """
        Snapshot the cart, post it as one enquiry, then clear the cart.

        On failure the cart is untouched and the server's message is reported
        verbatim when it sent one. No retry.
        """
        match self._precheck(form):
            case Error(e):
                return Error(e)
            case Ok(items):
                enquiry = Enquiry.snapshot(items, form)

        saga = S.step(self._post(enquiry.to_payload())).then(self._clear_cart)

        self._submitting = True
        try:
            outcome = await S.run_chain(saga)
        finally:
            self._submitting = False

        match outcome:
            case Ok(result):
                ack, cleared = result.value
                logger.info("Enquiry submitted with %d item(s)", len(enquiry.items))
                self._publish(NoticeLevel.SUCCESS, "Enquiry Submitted Successfully!")
                return Ok(Confirmation(
                    enquiry_id=_enquiry_id(ack),
                    items=enquiry.items,
                    totals=enquiry.totals,
                    cart_cleared=cleared,
                ))
            case Error(e):
                message = e.error.user_message(SUBMIT_FAILED)
                logger.warning("Enquiry submission failed: %s", e.error.message)
                self._publish(NoticeLevel.ERROR, message)
                return Error(CheckoutError(CheckoutErrorKind.SERVER, message))

    async def enquire(
        self,
        category: Category,
        item: CatalogItem,
        form: CheckoutForm,
    ) -> Result[Confirmation, CheckoutError]:
        """Enquire about a single catalog item; the cart is not involved."""
        match self._precheck(form, SERVICE_ENQUIRY_FIELDS, needs_items=False):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        enquiry = ServiceEnquiry.for_item(category, item, form)
        self._submitting = True
        try:
            outcome = await S.run(S.step(self._backend.submit_enquiry(enquiry.to_payload())))
        finally:
            self._submitting = False

        match outcome:
            case Ok(result):
                ack = result.value
                line = CartItem.from_catalog(category, item)
                self._publish(NoticeLevel.SUCCESS, "Enquiry sent successfully!")
                return Ok(Confirmation(
                    enquiry_id=_enquiry_id(ack),
                    items=(line,),
                    totals=P.summarize((line,)),
                    cart_cleared=False,
                ))
            case Error(e):
                message = e.error.user_message(SUBMIT_FAILED)
                self._publish(NoticeLevel.ERROR, message)
                return Error(CheckoutError(CheckoutErrorKind.SERVER, message))


__all__ = ("CheckoutPipeline", "SUBMIT_FAILED")
