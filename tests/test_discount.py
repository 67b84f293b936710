import pytest

from pakasir import ErrorKind, Ok
from pakasir import catalog as CT
from pakasir import discount as D


def make_ref(item_id, price, group, stock=5, visible=True):
    return CT.CatalogItemRef(item_id, item_id, price, stock, group, is_visible=visible)


class TestCouponResolution:
    def test_lookup_is_case_insensitive(self, coupons):
        result = D.resolve_coupon(coupons, "hemat10", 60_000)
        assert result == Ok(D.CouponQuote("HEMAT10", 6_000))

    def test_unknown_code(self, coupons):
        assert D.resolve_coupon(coupons, "NOPE", 60_000).unwrap_err().kind is ErrorKind.INVALID_CODE

    def test_inactive_code(self, coupons):
        assert D.resolve_coupon(coupons, "expired50", 60_000).unwrap_err().kind is ErrorKind.INACTIVE

    def test_below_minimum(self, coupons):
        err = D.resolve_coupon(coupons, "FUTOPREMIUM", 15_000).unwrap_err()
        assert err.kind is ErrorKind.BELOW_MINIMUM
        assert err.code == "FUTOPREMIUM"

    def test_minimum_is_inclusive(self, coupons):
        assert D.resolve_coupon(coupons, "FUTOPREMIUM", 100_000).unwrap().amount == 15_000

    def test_percentage_floors(self):
        registry = D.MemoryCouponRegistry([D.Coupon("P15", D.DiscountKind.PERCENTAGE, 15)])
        # 15% of 33_333 = 4_999.95
        assert D.resolve_coupon(registry, "P15", 33_333).unwrap().amount == 4_999

    def test_fixed_is_not_clamped_to_subtotal(self, coupons):
        assert D.resolve_coupon(coupons, "GRATIS", 5_000).unwrap().amount == 1_000_000


class TestCouponRegistry:
    def test_codes_are_normalized(self):
        registry = D.MemoryCouponRegistry()
        stored = registry.upsert(D.Coupon(" ramadan ", D.DiscountKind.FIXED, 5_000))
        assert stored.code == "RAMADAN"
        assert registry.find("Ramadan") == stored

    def test_set_active_and_remove(self, coupons):
        coupons.set_active("HEMAT10", False).unwrap()
        assert D.resolve_coupon(coupons, "HEMAT10", 60_000).unwrap_err().kind is ErrorKind.INACTIVE
        assert coupons.remove("hemat10") is True
        assert coupons.remove("hemat10") is False
        assert coupons.set_active("HEMAT10", True).unwrap_err().kind is ErrorKind.INVALID_CODE

    def test_negative_value_rejected(self):
        with pytest.raises(ValueError):
            D.Coupon("BAD", D.DiscountKind.FIXED, -1)


class TestBundleTiers:
    @pytest.mark.parametrize(("groups", "percent"), [(0, 0), (1, 0), (2, 5), (3, 10), (4, 15), (7, 15)])
    def test_default_schedule(self, groups, percent):
        assert D.tier_percent(groups) == percent

    def test_custom_schedule(self):
        assert D.tier_percent(3, {2: 3, 5: 20}) == 3
        assert D.tier_percent(5, {2: 3, 5: 20}) == 20


class TestBundleAssembly:
    def test_three_groups(self):
        members = [make_ref("a", 25_000, "A"), make_ref("b", 10_000, "B"), make_ref("c", 20_000, "C")]
        quote = D.assemble_bundle(members).unwrap()
        assert (quote.subtotal, quote.percent, quote.amount, quote.total) == (55_000, 10, 5_500, 49_500)
        assert quote.groups == 3

    def test_single_group_is_rejected(self):
        members = [make_ref("a", 25_000, "A"), make_ref("a2", 30_000, "A")]
        err = D.assemble_bundle(members).unwrap_err()
        assert err.kind is ErrorKind.INSUFFICIENT_BUNDLE_MEMBERS

    def test_out_of_stock_member(self):
        members = [make_ref("a", 25_000, "A"), make_ref("b", 10_000, "B", stock=0)]
        err = D.assemble_bundle(members).unwrap_err()
        assert err.kind is ErrorKind.OUT_OF_STOCK
        assert err.item_id == "b"

    def test_duplicates_collapse(self):
        a = make_ref("a", 25_000, "A")
        quote = D.assemble_bundle([a, a, make_ref("b", 10_000, "B")]).unwrap()
        assert [m.id for m in quote.members] == ["a", "b"]
        assert quote.amount == 1_750

    def test_candidates_pick_cheapest_available_per_group(self):
        refs = [
            make_ref("canva-1y", 150_000, "Canva"),
            make_ref("canva-1m", 20_000, "Canva"),
            make_ref("netflix-cheap", 5_000, "Netflix", stock=0),
            make_ref("netflix-1m", 30_000, "Netflix"),
            make_ref("hidden", 1, "Hidden", visible=False),
        ]
        assert [r.id for r in D.bundle_candidates(refs)] == ["canva-1m", "netflix-1m"]
