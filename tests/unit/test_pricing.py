"""Unit tests for order pricing."""
import pytest

from app.services.menu.base import ComboGroup, FlavorOption, MenuItem, QuantityOption
from app.services.ordering.models import OrderLineItem, SocialDiscounts
from app.services.ordering.pricing import (
    apply_keychain_promotion,
    apply_promotions,
    calculate_price,
    compute_totals,
    get_half_price_rule,
    resolve_unit_price,
    social_discount,
)


def line(product, price, **kwargs):
    return OrderLineItem(product=product, price=price, **kwargs)


class TestHalfPriceRules:
    """Test the per-kiosk half portion rules."""

    def test_plus_one_rule(self):
        """Generic rule: half of base plus one dollar."""
        assert calculate_price(10, True, "plus_one") == 6
        assert calculate_price(14, True, "plus_one") == 8

    def test_inverted_rule(self):
        """Inverted rule: base plus one, halved."""
        assert calculate_price(10, True, "inverted") == 5.5
        assert calculate_price(13, True, "inverted") == 7

    def test_lookup_rule_table(self):
        """Lookup rule uses the fixed table for listed base prices."""
        assert calculate_price(10, True, "lookup") == 6
        assert calculate_price(12, True, "lookup") == 7
        assert calculate_price(14, True, "lookup") == 8
        assert calculate_price(16, True, "lookup") == 9

    def test_lookup_rule_fallback(self):
        """Unlisted base prices fall back to a plain half."""
        assert calculate_price(20, True, "lookup") == 10
        assert calculate_price(9, True, "lookup") == 4.5

    def test_full_portion_ignores_rule(self):
        """Full portions always cost the base price."""
        for rule in ("plus_one", "inverted", "lookup", "none"):
            assert calculate_price(14, False, rule) == 14

    def test_unknown_rule_rejected(self):
        """Unknown rule names raise ValueError."""
        with pytest.raises(ValueError, match="half price rule"):
            get_half_price_rule("quarter")


class TestOrderTotals:
    """Test subtotal, discount and total calculation."""

    def test_no_discount(self):
        """Without social flags the total equals the subtotal."""
        totals = compute_totals([line("Waffle", 10), line("Croffle", 8)], SocialDiscounts())

        assert totals.subtotal == 18
        assert totals.discount == 0
        assert totals.total == 18

    @pytest.mark.parametrize(
        "followed, reposted, expected",
        [(False, False, 0), (True, False, 1), (False, True, 1), (True, True, 2)],
    )
    def test_social_discount_flags(self, followed, reposted, expected):
        """Each flag is worth one dollar, once per order."""
        social = SocialDiscounts(followed_instagram=followed, reposted_story=reposted)
        items = [line("Waffle", 10), line("Waffle", 10), line("Croffle", 8)]

        totals = compute_totals(items, social)

        assert totals.discount == expected
        assert totals.total == 28 - expected

    def test_total_never_negative(self):
        """The discount cannot push the total below zero."""
        social = SocialDiscounts(followed_instagram=True, reposted_story=True)

        totals = compute_totals([line("Hot Milk Tea", 0), line("Sample", 1)], social)

        assert totals.subtotal == 1
        assert totals.total == 0

    def test_fractional_prices(self):
        """Half portions under the inverted rule keep their cents."""
        totals = compute_totals([line("Waffle", 5.5), line("Waffle", 6.5)])
        assert totals.subtotal == 12
        assert totals.total == 12

    def test_missing_social_flags(self):
        """No social flags means no discount."""
        assert social_discount(None) == 0


class TestKeychainPromotion:
    """Test cart-wide keychain re-pricing."""

    def test_keychain_discounted_with_waffle(self):
        """A waffle in the cart brings the keychain down to $5."""
        items = apply_keychain_promotion([line("Waffle", 14), line("KeyChain", 8)])

        assert items[1].price == 5
        assert items[1].is_promotional is True

    def test_keychain_discounted_with_croffle(self):
        """A croffle qualifies as well."""
        items = apply_keychain_promotion([line("KeyChain", 8), line("Croffle", 8)])
        assert items[0].price == 5

    def test_keychain_regular_price_alone(self):
        """Without a waffle or croffle the keychain costs $8."""
        items = apply_keychain_promotion([line("KeyChain", 5, is_promotional=True)])

        assert items[0].price == 8
        assert items[0].is_promotional is False

    def test_other_items_untouched(self):
        """Promotion only changes keychain lines."""
        waffle = line("Waffle", 14)
        items = apply_keychain_promotion([waffle, line("KeyChain", 8)])
        assert items[0] == waffle

    def test_unknown_promotion_ignored(self):
        """Unknown promotion names leave the cart as is."""
        items = [line("KeyChain", 8)]
        assert apply_promotions(items, ["free-waffle-friday"]) == items


class TestResolveUnitPrice:
    """Test resolving menu selections to unit prices."""

    waffle = MenuItem(
        name="Waffle",
        half=True,
        flavors=[FlavorOption(name="Original", price=14), FlavorOption(name="Pistachio", price=16)],
    )

    def test_flavor_price(self):
        """Flavoured items take the flavour's price."""
        assert resolve_unit_price(self.waffle, "lookup", flavor="Pistachio") == 16

    def test_half_flavor_price(self):
        """Half portions apply the kiosk rule to the flavour price."""
        assert resolve_unit_price(self.waffle, "lookup", flavor="Original", is_half=True) == 8
        assert resolve_unit_price(self.waffle, "inverted", flavor="Original", is_half=True) == 7.5

    def test_drink_bundle_surcharge(self):
        """Bundled drink adds two dollars where offered."""
        item = MenuItem(name="Original Waffle", price=8, drink_bundle=True)
        assert resolve_unit_price(item, "none", with_drink=True) == 10
        assert resolve_unit_price(item, "none") == 8

    def test_quantity_based_price(self):
        """Bulk items are priced by pack size."""
        puff = MenuItem(
            name="Cream Puff",
            is_quantity_based=True,
            quantities=[QuantityOption(quantity=3, price=9), QuantityOption(quantity=6, price=16)],
        )
        assert resolve_unit_price(puff, "lookup", quantity=6) == 16

    def test_combo_price(self):
        """Combos add up the chosen option of each group."""
        combo = MenuItem(
            name="Drink Combo",
            groups=[
                ComboGroup(name="First", options=[FlavorOption(name="Lemonade", price=10)]),
                ComboGroup(name="Second", options=[FlavorOption(name="Lemonade", price=0)]),
            ],
        )
        assert resolve_unit_price(combo, "none", choices=["Lemonade", "lemonade"]) == 10
