"""
Reducer - Applies moves to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_move().

Design principles:
- Pure function: (state, move) -> outcome with a new state
- The input state is never touched; handlers work on a private clone
- Invalid caller input is an outcome, not an exception
- A state whose current player does not exist raises StateCorruptionError
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import (
    DrawCardsMove,
    FlockMove,
    Move,
    MoveOutcome,
    OutcomeCode,
    PassMove,
    PlayMove,
    SkipDrawMove,
)
from .deck import deal_hands, draw_cards, ensure_row_validity
from .rules import bank_amount, check_win_condition, find_capture
from .species import Species
from .state import GameState, GameStatus, Player, RuleVariant, Side, TurnPhase


# Phase in which each move kind is legal
LEGAL_PHASES: dict[type, TurnPhase] = {
    PlayMove: TurnPhase.PLAY,
    DrawCardsMove: TurnPhase.DRAW_DECISION,
    SkipDrawMove: TurnPhase.DRAW_DECISION,
    FlockMove: TurnPhase.FLOCK_OR_PASS,
    PassMove: TurnPhase.FLOCK_OR_PASS,
}


@dataclass
class Reducer:
    """
    Reducer applies moves to game state.

    Stateless - all state is in GameState, including its rules config.
    """

    def apply(self, state: GameState, move: Move) -> MoveOutcome:
        """
        Apply a move to the game state.

        Returns a MoveOutcome with the new state. Rejected moves return
        an unchanged copy with is_valid=False.
        """
        working = state.clone()
        player = working.current_player

        validation = self._validate_move(working, move)
        if validation:
            message, code = validation
            return MoveOutcome.invalid(working, message, code)

        handler = self._get_handler(type(move))
        return handler(working, player, move)

    def _validate_move(self, state: GameState, move: Move) -> tuple[str, OutcomeCode] | None:
        """
        Check the move is one we know and legal in the current phase.

        Returns (message, code) if invalid, None if valid.
        """
        if state.status == GameStatus.GAME_OVER:
            return "Game is over - no moves allowed", OutcomeCode.GAME_OVER

        legal_phase = LEGAL_PHASES.get(type(move))
        if legal_phase is None:
            return f"Unknown move: {move!r}", OutcomeCode.MALFORMED_MOVE

        if state.turn_phase != legal_phase:
            return (
                f"{move.move_type.value} is not allowed during {state.turn_phase.value}",
                OutcomeCode.WRONG_PHASE,
            )
        return None

    def _get_handler(self, move_class: type):
        """Get the handler function for a move kind."""
        handlers = {
            PlayMove: self._handle_play,
            DrawCardsMove: self._handle_draw,
            SkipDrawMove: self._handle_skip_draw,
            FlockMove: self._handle_flock,
            PassMove: self._handle_pass,
        }
        return handlers[move_class]

    def _handle_play(self, state: GameState, player: Player, move: PlayMove) -> MoveOutcome:
        """Play all copies of a species to a row end and resolve the capture."""
        if not isinstance(move.species, Species):
            return MoveOutcome.invalid(state, f"Unknown species: {move.species!r}", OutcomeCode.MALFORMED_MOVE)
        if not isinstance(move.side, Side):
            return MoveOutcome.invalid(state, f"Unknown side: {move.side!r}", OutcomeCode.MALFORMED_MOVE)
        row_index = move.row_index
        if isinstance(row_index, bool) or not isinstance(row_index, int) or not 0 <= row_index < len(state.rows):
            return MoveOutcome.invalid(state, f"No row {move.row_index!r}", OutcomeCode.MALFORMED_MOVE)

        played = player.hand_count(move.species)
        if played == 0:
            return MoveOutcome.invalid(
                state, f"{move.species.value} not in hand", OutcomeCode.MALFORMED_MOVE,
            )

        # 1. Remove from hand
        player.hand = [card for card in player.hand if card != move.species]

        # 2. Add to row
        row = state.rows[move.row_index]
        block = [move.species] * played
        if move.side == Side.LEFT:
            row[:0] = block
        else:
            row.extend(block)

        # 3. Capture
        start, stop = find_capture(row, move.species, played, move.side)
        captured = row[start:stop]
        del row[start:stop]

        # 4. Refill, regardless of capture
        ensure_row_validity(state, move.row_index)

        outcome = MoveOutcome(new_state=state, is_valid=True, captured=captured)

        if captured:
            player.hand.extend(captured)
            player.sort_hand()
            outcome.message = f"{player.name} played {move.species.value}, captured {len(captured)}."
            state.turn_phase = TurnPhase.FLOCK_OR_PASS
            state.log(outcome.message)
            return outcome

        outcome.message = f"{player.name} played {move.species.value}, no capture."
        state.log(outcome.message)

        auto_draw = state.config.rule_variant == RuleVariant.AUTO_DRAW
        if auto_draw:
            outcome.drawn = self._draw_into_hand(state, player)
            state.log(f"{player.name} drew {outcome.drawn} cards.")

        if not player.hand:
            self._end_round(state, player)
            outcome.round_ended = True
        elif auto_draw:
            state.turn_phase = TurnPhase.FLOCK_OR_PASS
        else:
            state.turn_phase = TurnPhase.DRAW_DECISION
        return outcome

    def _handle_draw(self, state: GameState, player: Player, move: DrawCardsMove) -> MoveOutcome:
        """Draw the replacement cards after a capture-free play."""
        drawn = self._draw_into_hand(state, player)
        message = f"{player.name} chose to draw {drawn} cards."
        state.turn_phase = TurnPhase.FLOCK_OR_PASS
        state.log(message)
        return MoveOutcome(new_state=state, is_valid=True, message=message, drawn=drawn)

    def _handle_skip_draw(self, state: GameState, player: Player, move: SkipDrawMove) -> MoveOutcome:
        """Decline the draw; on an empty hand this ends the round."""
        message = f"{player.name} skipped drawing."
        state.log(message)
        outcome = MoveOutcome(new_state=state, is_valid=True, message=message)
        if not player.hand:
            self._end_round(state, player)
            outcome.round_ended = True
        else:
            state.turn_phase = TurnPhase.FLOCK_OR_PASS
        return outcome

    def _handle_flock(self, state: GameState, player: Player, move: FlockMove) -> MoveOutcome:
        """Bank a qualifying set, check for a win, then end the turn."""
        if not isinstance(move.species, Species):
            return MoveOutcome.invalid(state, f"Unknown species: {move.species!r}", OutcomeCode.MALFORMED_MOVE)

        held = player.hand_count(move.species)
        amount = bank_amount(move.species, held)
        if amount == 0:
            return MoveOutcome.invalid(
                state,
                f"{held} {move.species.value} is not enough to flock",
                OutcomeCode.MALFORMED_MOVE,
            )

        player.hand = [card for card in player.hand if card != move.species]
        player.collection[move.species] = player.collection_count(move.species) + amount
        state.discard_pile.extend([move.species] * (held - amount))

        message = f"{player.name} flocked {move.species.value} (Banked {amount})."
        state.log(message)
        outcome = MoveOutcome(new_state=state, is_valid=True, message=message, flocked_amount=amount)

        if check_win_condition(player, state.config):
            state.winner = state.current_player_index
            state.status = GameStatus.GAME_OVER
            state.log(f"{player.name} WINS!")
            return outcome

        # At most one flock per turn
        if not player.hand:
            self._end_round(state, player)
            outcome.round_ended = True
        else:
            self._end_turn(state, player)
        return outcome

    def _handle_pass(self, state: GameState, player: Player, move: PassMove) -> MoveOutcome:
        """End the turn without flocking."""
        outcome = MoveOutcome(new_state=state, is_valid=True, message=f"{player.name} passed.")
        if not player.hand:
            self._end_round(state, player)
            outcome.round_ended = True
        else:
            self._end_turn(state, player)
        return outcome

    def _draw_into_hand(self, state: GameState, player: Player) -> int:
        cards = draw_cards(state, state.config.draw_on_no_capture)
        player.hand.extend(cards)
        player.sort_hand()
        return len(cards)

    def _end_turn(self, state: GameState, player: Player) -> None:
        state.current_player_index = state.next_player_index()
        state.turn_phase = TurnPhase.PLAY
        state.turn_number += 1
        state.log(f"{player.name} ended turn.")

    def _end_round(self, state: GameState, finisher: Player) -> None:
        """
        Discard every hand, deal fresh ones, and pass initiative to the
        seat after the player who emptied their hand.
        """
        state.log(f"Round {state.round_number} over! {finisher.name} emptied hand.")
        for p in state.players:
            state.discard_pile.extend(p.hand)
            p.hand = []

        deal_hands(state)

        state.current_player_index = state.next_player_index()
        state.turn_phase = TurnPhase.PLAY
        state.round_number += 1
        state.turn_number += 1
        state.log(f"Round {state.round_number} begins.")


_DEFAULT_REDUCER = Reducer()


def apply_move(state: GameState, move: Move) -> MoveOutcome:
    """
    Convenience function to apply a move.

    Usage:
        outcome = apply_move(state, PlayMove(Species.SPARROW, 0, Side.LEFT))
        if outcome.is_valid:
            state = outcome.new_state
    """
    return _DEFAULT_REDUCER.apply(state, move)
