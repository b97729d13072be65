"""
Create Order Use Case.

Buyer requests and seller assignments.
"""

from dataclasses import dataclass, field

from orderdesk.application.dto.requests import CreateOrderRequest
from orderdesk.application.dto.responses import OrderMutationResponse
from orderdesk.application.use_cases.common import (
    load_effective_defaults,
    warning_response,
)
from orderdesk.config import get_logger, get_settings
from orderdesk.core.entities.order import (
    Actor,
    LedgerRole,
    Order,
    OrderOrigin,
    Party,
    PaymentInfo,
)
from orderdesk.core.exceptions import LocationLookupError, OrderDeskError, ValidationError
from orderdesk.core.interfaces import ILocationLookup, IProformaDefaultsStore
from orderdesk.core.services import (
    DualLedgerSynchronizer,
    OrderStatusMachine,
    ProformaCalculator,
    charges_from_defaults,
    normalize_payment_mode,
)
from orderdesk.core.services.order_status_machine import initiating_role

logger = get_logger(__name__)


@dataclass
class CreateOrderResult:
    """Result of creating an order."""

    order: Order
    mirror_written: bool
    warnings: list[OrderDeskError] = field(default_factory=list)


class CreateOrderUseCase:
    """
    Create an order in both parties' ledgers.

    Buyer requests start at REQUESTED and wait for a quote. Seller
    assignments start at ASSIGNED with charges from the seller's proforma
    defaults, since no quote step follows.
    """

    def __init__(
        self,
        synchronizer: DualLedgerSynchronizer | None = None,
        defaults_store: IProformaDefaultsStore | None = None,
        location_lookup: ILocationLookup | None = None,
        status_machine: OrderStatusMachine | None = None,
        calculator: ProformaCalculator | None = None,
    ):
        self._synchronizer = synchronizer
        self._defaults_store = defaults_store
        self._location_lookup = location_lookup
        self._machine = status_machine
        self._calculator = calculator

    async def _get_synchronizer(self) -> DualLedgerSynchronizer:
        if self._synchronizer is None:
            from orderdesk.application.services import get_ledger_synchronizer

            self._synchronizer = await get_ledger_synchronizer()
        return self._synchronizer

    async def _get_defaults_store(self) -> IProformaDefaultsStore:
        if self._defaults_store is None:
            from orderdesk.infrastructure.storage.sqlite import get_proforma_defaults_store

            self._defaults_store = await get_proforma_defaults_store()
        return self._defaults_store

    def _get_location_lookup(self) -> ILocationLookup | None:
        if self._location_lookup is None and get_settings().lookup.enabled:
            from orderdesk.infrastructure.lookup import get_location_lookup

            self._location_lookup = get_location_lookup()
        return self._location_lookup

    def _get_machine(self) -> OrderStatusMachine:
        if self._machine is None:
            from orderdesk.application.services import get_status_machine

            self._machine = get_status_machine()
        return self._machine

    def _get_calculator(self) -> ProformaCalculator:
        if self._calculator is None:
            from orderdesk.application.services import get_proforma_calculator

            self._calculator = get_proforma_calculator()
        return self._calculator

    async def execute(self, request: CreateOrderRequest) -> CreateOrderResult:
        """Execute create order use case."""
        role = initiating_role(request.origin)
        logger.info(
            "create_order_started",
            origin=request.origin.value,
            buyer=request.buyer.business_id,
            seller=request.seller.business_id,
            lines=len(request.lines),
        )

        buyer, seller = request.buyer, request.seller
        if not buyer.business_id or not seller.business_id:
            raise ValidationError("business_id", "buyer and seller ids are required")
        if buyer.business_id == seller.business_id:
            raise ValidationError("seller", "buyer and seller must be different businesses")

        expected_actor = (buyer if role is LedgerRole.BUYER else seller).business_id
        if request.actor_id != expected_actor:
            raise ValidationError(
                "actor_id",
                f"{request.origin.value} orders are created by the {role.value.lower()}",
                request.actor_id,
            )

        if request.autofill_location:
            buyer = await self._autofill(buyer)
            seller = await self._autofill(seller)

        terms = normalize_payment_mode(request.payment_mode, request.credit_days)
        order = self._get_machine().new_order(
            origin=request.origin,
            buyer=buyer,
            seller=seller,
            lines=request.lines,
            actor=Actor(party_id=request.actor_id, name=request.actor_name, role=role),
            payment=PaymentInfo(
                mode=terms.code,
                is_paid=request.is_paid,
                credit_days=terms.credit_days,
            ),
            notes=request.notes,
        )

        if order.origin is OrderOrigin.SELLER_ASSIGNMENT:
            await self._apply_default_charges(order)

        propagation = await (await self._get_synchronizer()).propagate(order, role)

        logger.info(
            "create_order_complete",
            order_id=order.id,
            status=order.status.value,
            mirror_written=propagation.mirror_written,
        )
        return CreateOrderResult(
            order=order,
            mirror_written=propagation.mirror_written,
            warnings=list(propagation.warnings),
        )

    async def _apply_default_charges(self, order: Order) -> None:
        calculator = self._get_calculator()
        defaults = await load_effective_defaults(
            await self._get_defaults_store(),
            order.seller.business_id,
            order.buyer.business_id,
        )
        items_sub_total = calculator.calculate(order.lines).items_sub_total
        order.charges, order.rounding = charges_from_defaults(defaults, items_sub_total)
        order.breakdown = calculator.calculate_for_order(order)

    async def _autofill(self, party: Party) -> Party:
        """Fill missing city/state from the pincode. Lookup failures are non-fatal."""
        if not party.pincode or (party.city and party.state):
            return party

        lookup = self._get_location_lookup()
        if lookup is None:
            return party

        try:
            location = await lookup.lookup(party.pincode)
        except LocationLookupError as e:
            logger.warning(
                "location_autofill_failed",
                business_id=party.business_id,
                pincode=party.pincode,
                error=e.message,
            )
            return party

        if location is None:
            return party
        return party.model_copy(
            update={
                "city": party.city or location.city,
                "state": party.state or location.state,
            }
        )

    def to_response(self, result: CreateOrderResult) -> OrderMutationResponse:
        """Convert result to API response."""
        order = result.order
        return OrderMutationResponse(
            order=order.model_dump(mode="json", by_alias=True),
            status=order.status.value,
            status_label=order.status_label,
            mirror_written=result.mirror_written,
            warnings=[warning_response(w) for w in result.warnings],
        )
