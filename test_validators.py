#!/usr/bin/env python
"""
Tests for action validation: every rule and every error code.
"""
import unittest

from splendor_rules.core.constants import GemColor, CardTier, GamePhase, REGULAR_GEMS
from splendor_rules.core.actions import (
    ActionType, MAIN_ACTION_TYPES, TakeThreeGemsAction, TakeTwoGemsAction, ReserveCardAction,
    PurchaseCardAction, SelectNobleAction, DiscardGemsAction
)
from splendor_rules.core.engine import apply_action
from splendor_rules.core.validators import (
    ValidationErrorCode, ValidationResult, validate_action,
    calculate_effective_cost, can_afford_card, get_eligible_nobles,
    get_total_gems, needs_to_discard_gems, is_players_turn, is_game_in_progress,
    find_card_in_market
)

from fixtures import new_game, give_gems, set_bonuses, place_card_in_market

E, D, S, O, R, G = (
    GemColor.EMERALD, GemColor.DIAMOND, GemColor.SAPPHIRE, GemColor.ONYX, GemColor.RUBY, GemColor.GOLD
)


class ValidatorTestCase(unittest.TestCase):

    def setUp(self):
        self.state = new_game(2)
        self.current = self.state.players[0].id
        self.other = self.state.players[1].id

    def assertRejected(self, action, code):
        result = validate_action(self.state, action)
        self.assertFalse(result.valid, f"{action} should be rejected")
        self.assertEqual(result.error_code, code)
        self.assertTrue(result.error)

    def assertAccepted(self, action):
        result = validate_action(self.state, action)
        self.assertTrue(result.valid, f"{action} rejected: {result.error}")
        self.assertIsNone(result.error_code)


class TestGeneralChecks(ValidatorTestCase):

    def test_game_not_in_progress(self):
        self.state.phase = GamePhase.ENDED
        self.assertRejected(TakeThreeGemsAction(self.current, [E]), ValidationErrorCode.GAME_NOT_IN_PROGRESS)
        self.state.phase = GamePhase.WAITING
        self.assertRejected(TakeTwoGemsAction(self.current, E), ValidationErrorCode.GAME_NOT_IN_PROGRESS)

    def test_final_round_still_playable(self):
        self.state.phase = GamePhase.FINAL_ROUND
        self.assertAccepted(TakeThreeGemsAction(self.current, [E, D, S]))

    def test_not_players_turn(self):
        for action in (
            TakeThreeGemsAction(self.other, [E]),
            TakeTwoGemsAction(self.other, E),
            ReserveCardAction(self.other, tier=CardTier.TIER_1),
            PurchaseCardAction(self.other, self.state.market[CardTier.TIER_1][0].id),
        ):
            self.assertRejected(action, ValidationErrorCode.NOT_PLAYERS_TURN)

    def test_unknown_player(self):
        self.assertRejected(TakeThreeGemsAction("ghost", [E]), ValidationErrorCode.NOT_PLAYERS_TURN)

    def test_sub_flow_actions_without_pending(self):
        noble = self.state.nobles[0]
        self.assertRejected(SelectNobleAction(self.current, noble.id), ValidationErrorCode.INVALID_ACTION)
        self.assertRejected(DiscardGemsAction(self.current, {E: 1}), ValidationErrorCode.INVALID_ACTION)

    def test_only_main_actions_start_a_turn(self):
        self.assertEqual(
            MAIN_ACTION_TYPES,
            {ActionType.TAKE_THREE_GEMS, ActionType.TAKE_TWO_GEMS,
             ActionType.RESERVE_CARD, ActionType.PURCHASE_CARD}
        )
        noble = self.state.nobles[0]
        self.assertEqual(
            validate_action(self.state, SelectNobleAction(self.current, noble.id)).error,
            "No noble choice is pending"
        )
        self.assertEqual(
            validate_action(self.state, DiscardGemsAction(self.current, {E: 1})).error,
            "No discard is pending"
        )

    def test_result_to_dict(self):
        result = ValidationResult.fail(ValidationErrorCode.CANNOT_TAKE_GOLD, "no")
        self.assertEqual(result.to_dict(), {"valid": False, "error": "no", "errorCode": "CANNOT_TAKE_GOLD"})
        self.assertEqual(ValidationResult.ok().to_dict(), {"valid": True})

    def test_validation_does_not_mutate(self):
        before = self.state.to_dict()
        validate_action(self.state, TakeThreeGemsAction(self.current, [E, D, S]))
        validate_action(self.state, PurchaseCardAction(self.current, "t3_r01"))
        self.assertEqual(self.state.to_dict(), before)


class TestTakeThreeGems(ValidatorTestCase):

    def test_one_to_three_gems(self):
        self.assertAccepted(TakeThreeGemsAction(self.current, [R]))
        self.assertAccepted(TakeThreeGemsAction(self.current, [R, O]))
        self.assertAccepted(TakeThreeGemsAction(self.current, [R, O, E]))

    def test_wrong_count(self):
        self.assertRejected(TakeThreeGemsAction(self.current, []), ValidationErrorCode.INVALID_ACTION)
        self.assertRejected(TakeThreeGemsAction(self.current, [R, O, E, D]), ValidationErrorCode.INVALID_ACTION)

    def test_distinct(self):
        self.assertRejected(TakeThreeGemsAction(self.current, [R, R]), ValidationErrorCode.GEMS_NOT_DISTINCT)

    def test_gold(self):
        self.assertRejected(TakeThreeGemsAction(self.current, [R, G]), ValidationErrorCode.CANNOT_TAKE_GOLD)

    def test_empty_color(self):
        give_gems(self.state, self.other, {R: 4})
        self.assertRejected(
            TakeThreeGemsAction(self.current, [E, R]), ValidationErrorCode.INSUFFICIENT_GEMS_IN_BANK
        )


class TestTakeTwoGems(ValidatorTestCase):

    def test_four_in_bank(self):
        self.assertAccepted(TakeTwoGemsAction(self.current, S))

    def test_fewer_than_four(self):
        give_gems(self.state, self.other, {S: 1})
        self.assertRejected(TakeTwoGemsAction(self.current, S), ValidationErrorCode.REQUIRES_FOUR_GEMS_FOR_TWO)

    def test_gold(self):
        self.assertRejected(TakeTwoGemsAction(self.current, G), ValidationErrorCode.CANNOT_TAKE_GOLD)


class TestReserveCard(ValidatorTestCase):

    def test_market_card(self):
        card = self.state.market[CardTier.TIER_2][3]
        self.assertAccepted(ReserveCardAction(self.current, card_id=card.id))

    def test_blind_draw(self):
        self.assertAccepted(ReserveCardAction(self.current, tier=CardTier.TIER_3))

    def test_card_not_in_market(self):
        deck_card = self.state.decks[CardTier.TIER_1][0]
        self.assertRejected(ReserveCardAction(self.current, card_id=deck_card.id), ValidationErrorCode.CARD_NOT_AVAILABLE)
        self.assertRejected(ReserveCardAction(self.current, card_id="nope"), ValidationErrorCode.CARD_NOT_AVAILABLE)

    def test_empty_deck(self):
        self.state.decks[CardTier.TIER_3] = []
        self.assertRejected(ReserveCardAction(self.current, tier=CardTier.TIER_3), ValidationErrorCode.CARD_NOT_AVAILABLE)

    def test_blind_draw_needs_tier(self):
        self.assertRejected(ReserveCardAction(self.current), ValidationErrorCode.INVALID_ACTION)

    def test_named_card_ignores_tier_deck(self):
        card = self.state.market[CardTier.TIER_3][0]
        self.state.decks[CardTier.TIER_3] = []
        action = ReserveCardAction(self.current, card_id=card.id, tier=CardTier.TIER_3)
        self.assertFalse(action.is_blind)
        self.assertAccepted(action)
        after = apply_action(self.state, action)
        self.assertEqual(after.get_player(self.current).reserved_cards, [card])

    def test_three_reserved(self):
        player = self.state.get_player(self.current)
        player.reserved_cards = [self.state.decks[CardTier.TIER_1].pop(0) for _ in range(3)]
        self.assertRejected(ReserveCardAction(self.current, tier=CardTier.TIER_1), ValidationErrorCode.MAX_RESERVED_CARDS)


class TestPurchaseCard(ValidatorTestCase):

    def setUp(self):
        super().setUp()
        self.card = place_card_in_market(self.state, "t1_o05")  # costs 3 emerald

    def test_affordable_with_gems(self):
        give_gems(self.state, self.current, {E: 3})
        self.assertAccepted(PurchaseCardAction(self.current, self.card.id))

    def test_gold_covers_shortfall(self):
        give_gems(self.state, self.current, {E: 1, G: 2})
        self.assertAccepted(PurchaseCardAction(self.current, self.card.id))

    def test_bonus_reduces_cost(self):
        set_bonuses(self.state, self.current, {E: 3})
        self.assertAccepted(PurchaseCardAction(self.current, self.card.id))

    def test_insufficient(self):
        give_gems(self.state, self.current, {E: 1, G: 1})
        self.assertRejected(PurchaseCardAction(self.current, self.card.id), ValidationErrorCode.INSUFFICIENT_PAYMENT)

    def test_card_not_available(self):
        deck_card = self.state.decks[CardTier.TIER_3][0]
        self.assertRejected(PurchaseCardAction(self.current, deck_card.id), ValidationErrorCode.CARD_NOT_AVAILABLE)

    def test_own_reserved_card(self):
        reserved = self.state.decks[CardTier.TIER_1].pop(0)
        self.state.get_player(self.current).reserved_cards.append(reserved)
        set_bonuses(self.state, self.current, {color: 4 for color in REGULAR_GEMS})
        self.assertAccepted(PurchaseCardAction(self.current, reserved.id))

    def test_other_players_reserved_card(self):
        reserved = self.state.decks[CardTier.TIER_1].pop(0)
        self.state.get_player(self.other).reserved_cards.append(reserved)
        set_bonuses(self.state, self.current, {color: 4 for color in REGULAR_GEMS})
        self.assertRejected(PurchaseCardAction(self.current, reserved.id), ValidationErrorCode.CARD_NOT_AVAILABLE)


class TestPendingDiscard(ValidatorTestCase):
    """A player went from 9 to 12 gems and must discard 2."""

    def setUp(self):
        super().setUp()
        give_gems(self.state, self.current, {E: 2, D: 2, S: 2, O: 2, R: 1})
        self.state = apply_action(self.state, TakeThreeGemsAction(self.current, [E, D, S]))

    def test_pending(self):
        pending = self.state.pending_gem_discard
        self.assertIsNotNone(pending)
        self.assertEqual(pending.player_id, self.current)
        self.assertEqual(pending.amount, 2)
        self.assertEqual(self.state.current_player.id, self.current)

    def test_main_action_blocked(self):
        self.assertRejected(TakeThreeGemsAction(self.current, [O, R]), ValidationErrorCode.PENDING_DISCARD_REQUIRED)
        self.assertRejected(ReserveCardAction(self.current, tier=CardTier.TIER_1),
                            ValidationErrorCode.PENDING_DISCARD_REQUIRED)

    def test_noble_choice_blocked(self):
        self.assertRejected(SelectNobleAction(self.current, self.state.nobles[0].id),
                            ValidationErrorCode.PENDING_DISCARD_REQUIRED)

    def test_other_player_blocked(self):
        self.assertRejected(TakeThreeGemsAction(self.other, [O]), ValidationErrorCode.NOT_PLAYERS_TURN)
        self.assertRejected(DiscardGemsAction(self.other, {E: 2}), ValidationErrorCode.NOT_PLAYERS_TURN)

    def test_exact_discard(self):
        self.assertAccepted(DiscardGemsAction(self.current, {E: 1, O: 1}))
        self.assertAccepted(DiscardGemsAction(self.current, {R: 1, S: 1, D: 0}))

    def test_wrong_total(self):
        self.assertRejected(DiscardGemsAction(self.current, {E: 1}), ValidationErrorCode.INVALID_DISCARD_AMOUNT)
        self.assertRejected(DiscardGemsAction(self.current, {E: 3}), ValidationErrorCode.INVALID_DISCARD_AMOUNT)

    def test_more_than_held(self):
        self.assertRejected(DiscardGemsAction(self.current, {G: 2}), ValidationErrorCode.INVALID_DISCARD_AMOUNT)

    def test_negative_amount(self):
        self.assertRejected(DiscardGemsAction(self.current, {E: 3, D: -1}), ValidationErrorCode.INVALID_DISCARD_AMOUNT)


class TestPendingNobleChoice(ValidatorTestCase):
    """A player qualifies for every noble at once."""

    def setUp(self):
        super().setUp()
        set_bonuses(self.state, self.current, {color: 4 for color in REGULAR_GEMS})
        self.state = apply_action(self.state, TakeThreeGemsAction(self.current, [E, D, S]))

    def test_pending(self):
        pending = self.state.pending_noble_selection
        self.assertIsNotNone(pending)
        self.assertEqual(list(pending.eligible_noble_ids), [n.id for n in self.state.nobles])

    def test_main_action_blocked(self):
        self.assertRejected(TakeTwoGemsAction(self.current, O), ValidationErrorCode.PENDING_NOBLE_REQUIRED)

    def test_other_player_blocked(self):
        self.assertRejected(SelectNobleAction(self.other, self.state.nobles[0].id), ValidationErrorCode.NOT_PLAYERS_TURN)

    def test_select(self):
        self.assertAccepted(SelectNobleAction(self.current, self.state.nobles[1].id))

    def test_noble_not_in_play(self):
        self.assertRejected(SelectNobleAction(self.current, "noble_99"), ValidationErrorCode.NOBLE_NOT_ELIGIBLE)

    def test_requirements_not_met(self):
        set_bonuses(self.state, self.current, {})
        self.assertRejected(SelectNobleAction(self.current, self.state.nobles[0].id),
                            ValidationErrorCode.NOBLE_NOT_ELIGIBLE)


class TestHelpers(ValidatorTestCase):

    def test_effective_cost(self):
        card = place_card_in_market(self.state, "t1_d04")  # 3 emerald, 1 ruby, 1 onyx
        set_bonuses(self.state, self.current, {E: 2, R: 4})
        cost = calculate_effective_cost(self.state, self.current, card.id)
        self.assertEqual(cost, {E: 1, D: 0, S: 0, O: 1, R: 0})
        self.assertIsNone(calculate_effective_cost(self.state, self.current, "nope"))
        self.assertIsNone(calculate_effective_cost(self.state, "ghost", card.id))

    def test_can_afford(self):
        card = place_card_in_market(self.state, "t1_o05")
        self.assertFalse(can_afford_card(self.state, self.current, card.id))
        give_gems(self.state, self.current, {E: 2, G: 1})
        self.assertTrue(can_afford_card(self.state, self.current, card.id))
        self.assertFalse(can_afford_card(self.state, "ghost", card.id))

    def test_gem_totals(self):
        give_gems(self.state, self.current, {E: 4, D: 4, G: 3})
        self.assertEqual(get_total_gems(self.state, self.current), 11)
        self.assertTrue(needs_to_discard_gems(self.state, self.current))
        self.assertFalse(needs_to_discard_gems(self.state, self.other))
        self.assertEqual(get_total_gems(self.state, "ghost"), 0)

    def test_eligible_nobles(self):
        self.assertEqual(get_eligible_nobles(self.state, self.current), [])
        noble = self.state.nobles[0]
        set_bonuses(self.state, self.current, noble.requirements)
        self.assertEqual(get_eligible_nobles(self.state, self.current), [noble.id])

    def test_turn_and_phase(self):
        self.assertTrue(is_players_turn(self.state, self.current))
        self.assertFalse(is_players_turn(self.state, self.other))
        self.assertTrue(is_game_in_progress(self.state))
        self.state.phase = GamePhase.ENDED
        self.assertFalse(is_game_in_progress(self.state))

    def test_find_card_in_market(self):
        card = self.state.market[CardTier.TIER_3][2]
        self.assertIs(find_card_in_market(self.state, card.id), card)
        self.assertIsNone(find_card_in_market(self.state, self.state.decks[CardTier.TIER_3][0].id))


if __name__ == "__main__":
    unittest.main()
