import unittest

import numpy as np

from chess_siege.board import Board
from chess_siege.exceptions import BoardInvariantError
from chess_siege.piece import Piece
from chess_siege.types import Archetype, Owner, Square


class TestBoardStore(unittest.TestCase):
    def setUp(self):
        self.board = Board()
        self.king = self.board.spawn(Archetype.KING, Owner.PLAYER, 4, 4)

    def test_spawn_assigns_fresh_identities(self):
        pawn = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 2, 0)
        self.assertNotEqual(pawn.piece_id, self.king.piece_id)
        self.assertIs(self.board.get(pawn.piece_id), pawn)
        self.assertIs(self.board.at(2, 0), pawn)
        self.assertEqual(len(self.board), 2)

    def test_identities_are_never_reused(self):
        pawn = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 2, 0)
        self.board.remove(pawn.piece_id)
        again = self.board.spawn(Archetype.PAWN, Owner.ENEMY, 2, 0)
        self.assertGreater(again.piece_id, pawn.piece_id)
        self.assertIsNone(self.board.get(pawn.piece_id))

    def test_remove_frees_square(self):
        self.board.remove(self.king.piece_id)
        self.assertTrue(self.board.is_empty(4, 4))
        self.assertIsNone(self.board.king())

    def test_remove_at(self):
        self.assertIs(self.board.remove_at(4, 4), self.king)
        self.assertIsNone(self.board.remove_at(4, 4))

    def test_remove_unknown_identity_is_a_defect(self):
        with self.assertRaises(BoardInvariantError):
            self.board.remove(999)

    def test_square_collision_is_a_defect(self):
        with self.assertRaises(BoardInvariantError):
            self.board.spawn(Archetype.PAWN, Owner.ENEMY, 4, 4)
        self.assertEqual(len(self.board), 1)

    def test_duplicate_identity_is_a_defect(self):
        clone = Piece(self.king.piece_id, Archetype.PAWN, Owner.PLAYER, 0, 7)
        with self.assertRaises(BoardInvariantError):
            self.board.insert(clone)

    def test_off_board_insert_is_a_defect(self):
        with self.assertRaises(BoardInvariantError):
            self.board.spawn(Archetype.PAWN, Owner.PLAYER, 8, 0)

    def test_relocate_updates_occupancy(self):
        self.board.relocate(self.king.piece_id, 4, 5)
        self.assertTrue(self.board.is_empty(4, 4))
        self.assertIs(self.board.at(4, 5), self.king)
        self.assertEqual(self.king.square, Square(4, 5))

    def test_relocate_onto_occupied_square_is_a_defect(self):
        self.board.spawn(Archetype.PAWN, Owner.ENEMY, 4, 5)
        with self.assertRaises(BoardInvariantError):
            self.board.relocate(self.king.piece_id, 4, 5)

    def test_owner_filters(self):
        self.board.spawn(Archetype.PAWN, Owner.ENEMY, 2, 0)
        self.board.spawn(Archetype.ROOK, Owner.ENEMY, 5, 0)
        self.assertEqual(self.board.count(Owner.ENEMY), 2)
        self.assertEqual(
            [p.archetype for p in self.board.by_owner(Owner.PLAYER)], [Archetype.KING]
        )
        self.assertIs(self.board.king(), self.king)

    def test_reset_acted(self):
        self.king.has_acted = True
        self.board.reset_acted()
        self.assertFalse(self.king.has_acted)

    def test_copy_is_independent(self):
        working = self.board.copy()
        working.relocate(self.king.piece_id, 3, 3)
        fresh = working.spawn(Archetype.PAWN, Owner.ENEMY, 0, 0)
        self.assertEqual(self.board.get(self.king.piece_id).square, Square(4, 4))
        self.assertIsNone(self.board.at(0, 0))
        # ids keep counting from the source board's counter
        self.assertGreater(fresh.piece_id, self.king.piece_id)

    def test_build_tensor_planes(self):
        self.board.spawn(Archetype.PAWN, Owner.ENEMY, 2, 0)
        planes = self.board.build_tensor()
        self.assertEqual(planes.shape, (12, 8, 8))
        self.assertEqual(planes.dtype, np.float32)
        self.assertEqual(planes[5, 4, 4], 1.0)  # player king
        self.assertEqual(planes[6, 0, 2], 1.0)  # enemy pawn
        self.assertEqual(planes.sum(), 2.0)

    def test_build_tensor_rejects_wrong_buffer(self):
        with self.assertRaises(ValueError):
            self.board.build_tensor(out=np.zeros((10, 8, 8), dtype=np.float32))


if __name__ == "__main__":
    unittest.main()
