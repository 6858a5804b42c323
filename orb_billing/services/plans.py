"""Plan Service — read-only access to plans."""

from orb_billing.core.domain_types import ExternalPlanId, PlanId
from orb_billing.core.operation import Operation
from orb_billing.infrastructure.pager import Pager
from orb_billing.schemas.plans import Plan
from orb_billing.services.resource import Resource


class PlanService(Resource):

    def list(self, page_size: int | None = None) -> Pager[Plan]:
        return self._pager(Operation("GET", "plans"), Plan, page_size)

    async def get(self, plan_id: PlanId) -> Plan:
        return await self._call(Operation("GET", "plans/{plan_id}", {"plan_id": plan_id}), Plan)

    async def get_by_external_id(self, external_plan_id: ExternalPlanId) -> Plan:
        return await self._call(
            Operation(
                "GET", "plans/external_plan_id/{external_plan_id}",
                {"external_plan_id": external_plan_id},
            ),
            Plan,
        )
