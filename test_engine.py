#!/usr/bin/env python
"""
Tests for state transitions and the end-of-turn pipeline.
"""
import unittest

from splendor_rules.core.constants import GemColor, CardTier, GamePhase, REGULAR_GEMS
from splendor_rules.core.cards import DevelopmentCard, find_card_by_id
from splendor_rules.core.actions import (
    TakeThreeGemsAction, TakeTwoGemsAction, ReserveCardAction,
    PurchaseCardAction, SelectNobleAction, DiscardGemsAction
)
from splendor_rules.core.engine import (
    apply_action, apply_take_three_gems, calculate_payment, determine_winners,
    advance_turn, check_game_end_trigger, check_game_end, refill_market
)
from splendor_rules.core.exceptions import InvalidActionError
from splendor_rules.core.game import NormalTurn, AwaitingDiscard
from splendor_rules.core.validators import ValidationErrorCode, validate_action

from fixtures import (
    new_game, give_gems, set_bonuses, place_card_in_market, put_custom_card_in_market,
    gem_totals, card_ids_in_play
)

E, D, S, O, R, G = (
    GemColor.EMERALD, GemColor.DIAMOND, GemColor.SAPPHIRE, GemColor.ONYX, GemColor.RUBY, GemColor.GOLD
)


class EngineTestCase(unittest.TestCase):

    def setUp(self):
        self.state = new_game(2)
        self.first = self.state.players[0].id
        self.second = self.state.players[1].id


class TestTakeGems(EngineTestCase):

    def test_take_three_from_fresh_bank(self):
        new_state = apply_action(self.state, TakeThreeGemsAction(self.first, [E, D, S]))

        self.assertEqual(new_state.bank, {E: 3, D: 3, S: 3, O: 4, R: 4, G: 5})
        self.assertEqual(new_state.get_player(self.first).gems, {E: 1, D: 1, S: 1, O: 0, R: 0, G: 0})
        self.assertEqual(new_state.current_player_index, 1)
        self.assertEqual(new_state.round, 1)

    def test_take_two(self):
        new_state = apply_action(self.state, TakeTwoGemsAction(self.first, R))
        self.assertEqual(new_state.bank[R], 2)
        self.assertEqual(new_state.get_player(self.first).gems[R], 2)
        self.assertEqual(new_state.current_player_index, 1)

    def test_round_advances_on_wrap(self):
        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E]))
        state = apply_action(state, TakeThreeGemsAction(self.second, [D]))
        self.assertEqual(state.current_player_index, 0)
        self.assertEqual(state.round, 2)
        self.assertEqual(state.phase, GamePhase.PLAYING)

    def test_input_state_untouched(self):
        before = self.state.to_dict()
        apply_action(self.state, TakeThreeGemsAction(self.first, [E, D, S]))
        self.assertEqual(self.state.to_dict(), before)

    def test_invalid_action_raises(self):
        with self.assertRaises(InvalidActionError) as ctx:
            apply_action(self.state, TakeThreeGemsAction(self.second, [E]))
        self.assertEqual(ctx.exception.error_code, ValidationErrorCode.NOT_PLAYERS_TURN)

        with self.assertRaises(ValueError):
            apply_action(self.state, TakeTwoGemsAction(self.first, G))


class TestReserve(EngineTestCase):

    def test_reserve_from_market_refills_slot(self):
        card = self.state.market[CardTier.TIER_2][2]
        top = self.state.decks[CardTier.TIER_2][0]

        new_state = apply_action(self.state, ReserveCardAction(self.first, card_id=card.id))
        player = new_state.get_player(self.first)

        self.assertEqual(player.reserved_cards, [card])
        self.assertIs(new_state.market[CardTier.TIER_2][2], top)
        self.assertEqual(len(new_state.decks[CardTier.TIER_2]), 25)
        self.assertEqual(player.gems[G], 1)
        self.assertEqual(new_state.bank[G], 4)

    def test_blind_reserve_takes_top_of_deck(self):
        top = self.state.decks[CardTier.TIER_3][0]
        market_before = list(self.state.market[CardTier.TIER_3])

        new_state = apply_action(self.state, ReserveCardAction(self.first, tier=CardTier.TIER_3))

        self.assertEqual(new_state.get_player(self.first).reserved_cards, [top])
        self.assertEqual(new_state.market[CardTier.TIER_3], market_before)
        self.assertEqual(len(new_state.decks[CardTier.TIER_3]), 15)

    def test_no_gold_left(self):
        give_gems(self.state, self.second, {G: 5})
        new_state = apply_action(self.state, ReserveCardAction(self.first, tier=CardTier.TIER_1))
        self.assertEqual(new_state.get_player(self.first).gems[G], 0)
        self.assertEqual(len(new_state.get_player(self.first).reserved_cards), 1)

    def test_empty_deck_leaves_slot_empty(self):
        self.state.decks[CardTier.TIER_1] = []
        card = self.state.market[CardTier.TIER_1][1]
        new_state = apply_action(self.state, ReserveCardAction(self.first, card_id=card.id))
        self.assertIsNone(new_state.market[CardTier.TIER_1][1])
        self.assertEqual(len([c for c in new_state.market[CardTier.TIER_1] if c is not None]), 3)

    def test_refill_uses_first_empty_slot(self):
        self.state.market[CardTier.TIER_1][0] = None
        top = self.state.decks[CardTier.TIER_1][0]
        new_state = refill_market(self.state, CardTier.TIER_1)
        self.assertIs(new_state.market[CardTier.TIER_1][0], top)
        self.assertIsNone(self.state.market[CardTier.TIER_1][0])


class TestPurchase(EngineTestCase):

    def test_bonus_reduces_payment(self):
        card = DevelopmentCard(id="test_emerald", tier=CardTier.TIER_1, cost={E: 3}, bonus=E)
        put_custom_card_in_market(self.state, card, slot=0)
        set_bonuses(self.state, self.first, {E: 2})
        give_gems(self.state, self.first, {E: 1, G: 1})

        self.assertEqual(calculate_payment(self.state, self.first, card.id),
                         {E: 1, D: 0, S: 0, O: 0, R: 0, G: 0})

        new_state = apply_action(self.state, PurchaseCardAction(self.first, card.id))
        player = new_state.get_player(self.first)

        self.assertEqual(player.purchased_cards, [card])
        self.assertEqual(player.bonuses[E], 3)
        self.assertEqual(player.gems[E], 0)
        self.assertEqual(player.gems[G], 1)
        self.assertEqual(new_state.bank[E], 4)
        self.assertIsNot(new_state.market[CardTier.TIER_1][0], card)

    def test_gold_pays_remainder(self):
        card = place_card_in_market(self.state, "t1_o05")
        give_gems(self.state, self.first, {E: 1, G: 2})

        new_state = apply_action(self.state, PurchaseCardAction(self.first, card.id))
        player = new_state.get_player(self.first)

        self.assertEqual(player.get_total_gems(), 0)
        self.assertEqual(player.bonuses[O], 1)
        self.assertEqual(new_state.bank[G], 5)
        self.assertEqual(new_state.bank[E], 4)
        self.assertEqual(gem_totals(new_state), gem_totals(self.state))

    def test_points_added(self):
        card = place_card_in_market(self.state, "t1_r08")  # 4 emerald, 1 point
        give_gems(self.state, self.first, {E: 4})
        new_state = apply_action(self.state, PurchaseCardAction(self.first, card.id))
        self.assertEqual(new_state.get_player(self.first).prestige_points, 1)

    def test_reserved_purchase_does_not_refill(self):
        card = self.state.decks[CardTier.TIER_1].pop(0)
        self.state.get_player(self.first).reserved_cards.append(card)
        set_bonuses(self.state, self.first, {color: 4 for color in REGULAR_GEMS})
        market_before = list(self.state.market[CardTier.TIER_1])
        deck_before = len(self.state.decks[CardTier.TIER_1])

        new_state = apply_action(self.state, PurchaseCardAction(self.first, card.id))
        player = new_state.get_player(self.first)

        self.assertEqual(player.reserved_cards, [])
        self.assertEqual(player.purchased_cards, [card])
        self.assertEqual(new_state.market[CardTier.TIER_1], market_before)
        self.assertEqual(len(new_state.decks[CardTier.TIER_1]), deck_before)

    def test_market_purchase_refills_same_slot(self):
        card = place_card_in_market(self.state, "t1_o05", slot=3)
        top = self.state.decks[CardTier.TIER_1][0]
        give_gems(self.state, self.first, {E: 3})
        new_state = apply_action(self.state, PurchaseCardAction(self.first, card.id))
        self.assertIs(new_state.market[CardTier.TIER_1][3], top)
        self.assertEqual(sorted(card_ids_in_play(new_state)), sorted(card_ids_in_play(self.state)))

    def test_payment_unknown(self):
        self.assertIsNone(calculate_payment(self.state, self.first, "nope"))
        self.assertIsNone(calculate_payment(self.state, "ghost", self.state.market[CardTier.TIER_1][0].id))


class TestGemLimit(EngineTestCase):

    def setUp(self):
        super().setUp()
        give_gems(self.state, self.first, {E: 2, D: 2, S: 2, O: 2, R: 1})

    def test_nine_to_twelve_requires_discard(self):
        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E, D, S]))

        self.assertEqual(state.turn_phase, AwaitingDiscard(player_id=self.first, amount=2))
        self.assertEqual(state.current_player_index, 0)

        result = validate_action(state, TakeThreeGemsAction(self.first, [O, R]))
        self.assertEqual(result.error_code, ValidationErrorCode.PENDING_DISCARD_REQUIRED)

    def test_discard_resumes_turn(self):
        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E, D, S]))
        state = apply_action(state, DiscardGemsAction(self.first, {E: 1, D: 1}))

        self.assertEqual(state.turn_phase, NormalTurn())
        self.assertEqual(state.get_player(self.first).get_total_gems(), 10)
        self.assertEqual(state.current_player_index, 1)
        self.assertEqual(gem_totals(state), gem_totals(self.state))

    def test_discard_then_noble_choice(self):
        set_bonuses(self.state, self.first, {color: 4 for color in REGULAR_GEMS})
        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E, D, S]))
        self.assertIsNotNone(state.pending_gem_discard)

        state = apply_action(state, DiscardGemsAction(self.first, {G: 0, E: 2}))
        self.assertIsNone(state.pending_gem_discard)
        self.assertIsNotNone(state.pending_noble_selection)
        self.assertEqual(state.current_player_index, 0)

    def test_exactly_ten_is_fine(self):
        state = apply_action(self.state, TakeThreeGemsAction(self.first, [R]))
        self.assertEqual(state.turn_phase, NormalTurn())
        self.assertEqual(state.current_player_index, 1)


class TestNobles(EngineTestCase):

    def test_single_noble_awarded(self):
        noble = self.state.nobles[0]
        set_bonuses(self.state, self.first, noble.requirements)

        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E]))
        player = state.get_player(self.first)

        self.assertEqual(player.nobles, [noble])
        self.assertEqual(player.prestige_points, 3)
        self.assertNotIn(noble, state.nobles)
        self.assertEqual(len(state.nobles), 2)
        self.assertEqual(state.current_player_index, 1)

    def test_several_nobles_wait_for_choice(self):
        set_bonuses(self.state, self.first, {color: 4 for color in REGULAR_GEMS})
        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E]))

        pending = state.pending_noble_selection
        self.assertEqual(pending.player_id, self.first)
        self.assertEqual(len(pending.eligible_noble_ids), 3)
        self.assertEqual(state.current_player_index, 0)

        chosen = state.nobles[1]
        state = apply_action(state, SelectNobleAction(self.first, chosen.id))
        player = state.get_player(self.first)

        self.assertEqual(player.nobles, [chosen])
        self.assertEqual(player.prestige_points, 3)
        self.assertEqual(len(state.nobles), 2)
        self.assertEqual(state.turn_phase, NormalTurn())
        self.assertEqual(state.current_player_index, 1)


class TestGameEnd(EngineTestCase):

    def test_final_round_then_end(self):
        self.state.get_player(self.first).prestige_points = 15

        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E]))
        self.assertEqual(state.phase, GamePhase.FINAL_ROUND)
        self.assertEqual(state.end_game_triggered_by, self.first)
        self.assertEqual(state.winners, [])
        self.assertEqual(state.current_player_index, 1)

        state = apply_action(state, TakeThreeGemsAction(self.second, [D]))
        self.assertEqual(state.phase, GamePhase.ENDED)
        self.assertEqual(state.winners, [self.first])
        self.assertEqual(state.round, 2)

        result = validate_action(state, TakeThreeGemsAction(self.first, [E]))
        self.assertEqual(result.error_code, ValidationErrorCode.GAME_NOT_IN_PROGRESS)

    def test_last_seat_trigger_ends_immediately(self):
        state = apply_action(self.state, TakeThreeGemsAction(self.first, [E]))
        state.get_player(self.second).prestige_points = 16
        state = apply_action(state, TakeThreeGemsAction(self.second, [D]))
        self.assertEqual(state.phase, GamePhase.ENDED)
        self.assertEqual(state.winners, [self.second])

    def test_trigger_picks_first_in_seat_order(self):
        for player in self.state.players:
            player.prestige_points = 15
        check_game_end_trigger(self.state)
        self.assertEqual(self.state.end_game_triggered_by, self.first)

    def test_trigger_only_from_playing(self):
        self.state.phase = GamePhase.FINAL_ROUND
        self.state.end_game_triggered_by = self.second
        self.state.get_player(self.first).prestige_points = 20
        check_game_end_trigger(self.state)
        self.assertEqual(self.state.end_game_triggered_by, self.second)

    def test_check_game_end_outside_final_round(self):
        check_game_end(self.state)
        self.assertEqual(self.state.phase, GamePhase.PLAYING)

    def test_advance_turn_after_end(self):
        self.state.phase = GamePhase.ENDED
        advance_turn(self.state)
        self.assertEqual(self.state.current_player_index, 0)


class TestWinners(unittest.TestCase):

    def setUp(self):
        self.state = new_game(3)
        self.a, self.b, self.c = self.state.players

    def test_highest_points(self):
        self.a.prestige_points, self.b.prestige_points, self.c.prestige_points = 15, 17, 12
        self.assertEqual(determine_winners(self.state), [self.b.id])

    def test_fewest_cards_breaks_tie(self):
        self.a.prestige_points = self.b.prestige_points = 16
        self.a.purchased_cards = [find_card_by_id("t1_d01"), find_card_by_id("t1_d02")]
        self.b.purchased_cards = [find_card_by_id("t1_d03")]
        self.assertEqual(determine_winners(self.state), [self.b.id])

    def test_shared_victory(self):
        self.a.prestige_points = self.c.prestige_points = 15
        self.assertEqual(determine_winners(self.state), [self.a.id, self.c.id])


class TestPublicTransitions(EngineTestCase):

    def test_apply_functions_leave_input(self):
        before = self.state.to_dict()
        new_state = apply_take_three_gems(self.state, TakeThreeGemsAction(self.first, [R, O]))
        self.assertEqual(self.state.to_dict(), before)
        self.assertEqual(new_state.bank[R], 3)


if __name__ == "__main__":
    unittest.main()
