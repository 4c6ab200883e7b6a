import time

import pytest

from gridlife.config import GameConfig
from gridlife.world.board import Board

TARGET_SPF = 1.0 / GameConfig().target_fps  # Seconds per frame

@pytest.mark.performance
def test_average_advance_time() -> None:
    """Tests that advancing a 200x200 board fits comfortably inside one 60 FPS frame."""
    board = Board(200, 200, seed=42)
    board.randomize(40)

    num_generations_to_test = 60
    total_processing_time = 0.0
    for _ in range(num_generations_to_test):
        start = time.perf_counter()
        board.advance()
        total_processing_time += time.perf_counter() - start

    average_ms = (total_processing_time / num_generations_to_test) * 1000.0
    target_ms = TARGET_SPF * 1000.0
    print(f"Average advance time: {average_ms:.4f} ms (frame budget {target_ms:.4f} ms)")

    assert average_ms <= target_ms, \
        f"Average advance time {average_ms:.2f} ms exceeded the frame budget {target_ms:.2f} ms."
