"""Plan and Coupon Services — read-only listings and lookups."""

from decimal import Decimal

from orb_billing.schemas.coupons import CouponListParams

from tests.services.mock_orb import page, plan_payload, reply


async def test_list_and_get_plans(client, orb):
    orb.add(
        reply(200, page([plan_payload(), plan_payload(id="plan_2", external_plan_id=None)])),
        reply(200, plan_payload(prices=[{
            "id": "price_1",
            "name": "API calls",
            "model_type": "tiered",
            "tiered_config": {"tiers": [
                {"first_unit": 0, "last_unit": 1000, "unit_amount": "0.00"},
                {"first_unit": 1000, "last_unit": None, "unit_amount": "0.002"},
            ]},
        }])),
        reply(200, plan_payload()),
    )

    plans = await client.plans.list().collect()
    plan = await client.plans.get("plan_1")
    by_external = await client.plans.get_by_external_id("pro")

    assert [p.id for p in plans] == ["plan_1", "plan_2"]
    assert plans[1].external_plan_id is None
    tiers = plan.prices[0].tiered_config.tiers
    assert tiers[1].unit_amount == Decimal("0.002")
    assert tiers[1].last_unit is None
    assert plan.prices[0].unit_config is None
    assert by_external.name == "Pro"
    assert orb.paths() == ["/v1/plans", "/v1/plans/plan_1", "/v1/plans/external_plan_id/pro"]


async def test_list_coupons_with_filters(client, orb):
    orb.add(reply(200, page([{
        "id": "cpn_1",
        "redemption_code": "SPRING",
        "duration_in_months": 3,
        "discount": {
            "discount_type": "percentage",
            "applies_to_price_ids": ["price_1"],
            "percentage_discount": 0.15,
        },
    }])))

    coupons = await client.coupons.list(CouponListParams(redemption_code="SPRING", show_archived=False)).collect()

    assert coupons[0].discount.percentage_discount == Decimal("0.15")
    assert coupons[0].discount.amount_discount is None
    params = orb.last.url.params
    assert params["redemption_code"] == "SPRING"
    assert params["show_archived"] == "false"
