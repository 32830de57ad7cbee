import unittest

from chess_siege.board import Board
from chess_siege.policy import GreedyPolicy, acting_order, capture_value, run_enemy_phase
from chess_siege.types import Archetype, Owner, Square


class TestGreedyPolicy(unittest.TestCase):
    def setUp(self):
        self.board = Board()
        self.policy = GreedyPolicy()

    def test_capture_value_uses_piece_costs(self):
        self.board.spawn(Archetype.ROOK, Owner.PLAYER, 3, 3)
        self.assertEqual(capture_value(self.board, Square(3, 3)), 40)
        self.assertEqual(capture_value(self.board, Square(0, 0)), 0)

    def test_prefers_most_valuable_capture(self):
        queen = self.board.spawn(Archetype.QUEEN, Owner.ENEMY, 0, 0)
        self.board.spawn(Archetype.PAWN, Owner.PLAYER, 0, 3)
        self.board.spawn(Archetype.ROOK, Owner.PLAYER, 3, 3)
        self.assertEqual(self.policy.select_move(queen, self.board), Square(3, 3))

    def test_without_captures_advances_deepest(self):
        rook = self.board.spawn(Archetype.ROOK, Owner.ENEMY, 0, 0)
        self.assertEqual(self.policy.select_move(rook, self.board), Square(0, 7))

    def test_equal_depth_keeps_rule_order(self):
        # rule order is (5,2),(3,2),(6,1),(2,1); both rank-6 squares tie on depth
        knight = self.board.spawn(Archetype.KNIGHT, Owner.ENEMY, 4, 0)
        self.assertEqual(self.policy.select_move(knight, self.board), Square(5, 2))

    def test_king_capture_beats_richer_target(self):
        knight = self.board.spawn(Archetype.KNIGHT, Owner.ENEMY, 3, 2)
        self.board.spawn(Archetype.KING, Owner.PLAYER, 4, 4)
        self.board.spawn(Archetype.QUEEN, Owner.PLAYER, 5, 3)
        self.assertEqual(self.policy.select_move(knight, self.board), Square(4, 4))

    def test_no_moves_returns_none(self):
        pawn = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 3, 3)
        self.board.spawn(Archetype.ROOK, Owner.PLAYER, 3, 4)
        self.assertIsNone(self.policy.select_move(pawn, self.board))


class TestEnemyPhase(unittest.TestCase):
    def setUp(self):
        self.board = Board()

    def test_acting_order_is_deepest_first(self):
        a = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 0, 1)
        b = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 5, 4)
        c = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 2, 4)
        self.board.spawn(Archetype.KING, Owner.PLAYER, 4, 7)
        self.assertEqual(acting_order(self.board), [b.piece_id, c.piece_id, a.piece_id])

    def test_each_enemy_moves_once_and_sees_earlier_moves(self):
        front = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 3, 4)
        back = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 3, 3)
        report = run_enemy_phase(self.board)
        self.assertEqual(len(report.moves), 2)
        self.assertEqual(self.board.get(front.piece_id).square, Square(3, 5))
        self.assertEqual(self.board.get(back.piece_id).square, Square(3, 4))

    def test_capture_removes_player_piece(self):
        pawn = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 3, 3)
        knight = self.board.spawn(Archetype.KNIGHT, Owner.PLAYER, 4, 4)
        report = run_enemy_phase(self.board)
        self.assertIsNone(self.board.get(knight.piece_id))
        self.assertEqual(self.board.get(pawn.piece_id).square, Square(4, 4))
        self.assertIs(report.moves[0].events.captured, Archetype.KNIGHT)

    def test_pawn_reaching_back_rank_breaches(self):
        pawn = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 2, 6)
        report = run_enemy_phase(self.board)
        self.assertEqual(report.breaches, 1)
        self.assertIsNone(self.board.get(pawn.piece_id))
        self.assertTrue(self.board.is_empty(2, 7))
        self.assertTrue(report.moves[0].events.breached)

    def test_king_capture_stops_the_phase(self):
        knight = self.board.spawn(Archetype.KNIGHT, Owner.ENEMY, 3, 2)
        pawn = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 0, 1)
        king = self.board.spawn(Archetype.KING, Owner.PLAYER, 4, 4)
        self.board.spawn(Archetype.QUEEN, Owner.PLAYER, 5, 3)
        report = run_enemy_phase(self.board)
        self.assertTrue(report.king_captured)
        self.assertEqual(report.moves, [])
        self.assertEqual(self.board.get(knight.piece_id).square, Square(3, 2))
        self.assertEqual(self.board.get(pawn.piece_id).square, Square(0, 1))
        self.assertIsNotNone(self.board.get(king.piece_id))

    def test_blocked_pawn_stays_put(self):
        pawn = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 3, 3)
        self.board.spawn(Archetype.ROOK, Owner.PLAYER, 3, 4)
        report = run_enemy_phase(self.board)
        self.assertEqual(report.moves, [])
        self.assertEqual(self.board.get(pawn.piece_id).square, Square(3, 3))

    def test_player_pieces_never_move(self):
        rook = self.board.spawn(Archetype.ROOK, Owner.PLAYER, 0, 7)
        self.board.spawn(Archetype.PAWN, Owner.ENEMY, 7, 0)
        run_enemy_phase(self.board)
        self.assertEqual(self.board.get(rook.piece_id).square, Square(0, 7))


if __name__ == "__main__":
    unittest.main()
