import unittest

from chess_siege.config import Config, EconomyConfig, config
from chess_siege.types import Archetype


class TestConfig(unittest.TestCase):
    def test_default_values(self):
        cfg = Config()
        self.assertEqual(cfg.BOARD_SIZE, 8)
        self.assertEqual(cfg.PAWN_CAP_PER_ROUND, 3)
        self.assertEqual(cfg.TOTAL_WAVES, 20)
        self.assertEqual(cfg.KING_START, (4, 4))

    def test_derived_rows(self):
        self.assertEqual(config.ENEMY_BACK_ROW, 0)
        self.assertEqual(config.PLAYER_BACK_ROW, 7)

    def test_rejects_other_board_sizes(self):
        with self.assertRaises(ValueError):
            Config(BOARD_SIZE=10)

    def test_rejects_negative_starting_points(self):
        with self.assertRaises(ValueError):
            Config(STARTING_POINTS=-1)


class TestEconomyConfig(unittest.TestCase):
    def test_costs_and_rewards(self):
        cfg = EconomyConfig()
        self.assertEqual(cfg.piece_costs[Archetype.QUEEN], 60)
        self.assertEqual(cfg.kill_rewards[Archetype.ROOK], 20)
        self.assertEqual(cfg.kill_rewards[Archetype.KING], 0)

    def test_reward_is_half_the_cost(self):
        cfg = EconomyConfig()
        for archetype in cfg.purchasable():
            self.assertEqual(cfg.kill_rewards[archetype] * 2, cfg.piece_costs[archetype])

    def test_king_is_not_purchasable(self):
        self.assertNotIn(Archetype.KING, EconomyConfig().purchasable())
        self.assertEqual(len(EconomyConfig().purchasable()), 5)

    def test_custom_values(self):
        cfg = EconomyConfig(breach_penalty=25, sacrifice_bonus=5)
        self.assertEqual(cfg.breach_penalty, 25)
        self.assertEqual(cfg.sacrifice_bonus, 5)


if __name__ == "__main__":
    unittest.main()
