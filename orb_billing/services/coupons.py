"""Coupon Service — read-only coupon listing."""

from orb_billing.core.operation import Operation
from orb_billing.infrastructure.pager import Pager
from orb_billing.schemas.coupons import Coupon, CouponListParams
from orb_billing.services.resource import Resource


class CouponService(Resource):

    def list(self, params: CouponListParams | None = None) -> Pager[Coupon]:
        params = params or CouponListParams()
        return self._pager(
            Operation("GET", "coupons", query=params.to_query()), Coupon, params.page_size,
        )
