"""Tests for the bucket priority queue."""

import random

import pytest
from py_hexmap.core.priority_queue import HexCellPriorityQueue


class TestHexCellPriorityQueue:
    """Test enqueue, dequeue, change and clear."""

    @pytest.fixture
    def queue(self):
        return HexCellPriorityQueue(32)

    def test_empty_queue(self, queue):
        assert len(queue) == 0
        assert not queue
        with pytest.raises(IndexError):
            queue.dequeue()

    def test_dequeue_returns_minimum(self, queue):
        for cell, priority in [(0, 5), (1, 2), (2, 9), (3, 0), (4, 2)]:
            queue.enqueue(cell, priority)

        order = [queue.dequeue() for _ in range(5)]
        priorities = {0: 5, 1: 2, 2: 9, 3: 0, 4: 2}
        assert [priorities[c] for c in order] == [0, 2, 2, 5, 9]
        assert not queue

    def test_lifo_within_bucket(self, queue):
        queue.enqueue(1, 3)
        queue.enqueue(2, 3)
        queue.enqueue(3, 3)
        assert [queue.dequeue() for _ in range(3)] == [3, 2, 1]

    def test_enqueue_lower_after_dequeue(self, queue):
        queue.enqueue(1, 4)
        queue.enqueue(2, 6)
        assert queue.dequeue() == 1
        queue.enqueue(3, 1)
        assert queue.dequeue() == 3
        assert queue.dequeue() == 2

    def test_buckets_grow_lazily(self, queue):
        queue.enqueue(7, 1000)
        queue.enqueue(8, 3)
        assert queue.dequeue() == 8
        assert queue.dequeue() == 7

    def test_negative_priority_rejected(self, queue):
        with pytest.raises(ValueError):
            queue.enqueue(1, -1)

    def test_change_moves_cell(self, queue):
        queue.enqueue(1, 10)
        queue.enqueue(2, 10)
        queue.enqueue(3, 5)
        queue.change(1, 10, 2)

        assert len(queue) == 3
        assert queue.dequeue() == 1
        assert queue.dequeue() == 3
        assert queue.dequeue() == 2

    def test_change_head_of_bucket(self, queue):
        queue.enqueue(1, 4)
        queue.enqueue(2, 4)
        queue.change(2, 4, 1)
        assert queue.dequeue() == 2
        assert queue.dequeue() == 1

    def test_change_missing_cell(self, queue):
        queue.enqueue(1, 4)
        with pytest.raises(KeyError):
            queue.change(2, 4, 1)
        with pytest.raises(KeyError):
            queue.change(1, 50, 1)

    def test_clear_behaves_as_fresh(self, queue):
        queue.enqueue(1, 7)
        queue.enqueue(2, 3)
        queue.clear()
        assert len(queue) == 0

        queue.enqueue(5, 9)
        queue.enqueue(6, 4)
        assert queue.dequeue() == 6
        assert queue.dequeue() == 5
        assert not queue

    def test_random_sequence_always_yields_minimum(self, queue):
        rng = random.Random(1234)
        queued = {}
        free = list(range(32))
        for _ in range(500):
            action = rng.random()
            if free and (action < 0.5 or not queued):
                cell = free.pop(rng.randrange(len(free)))
                priority = rng.randrange(0, 40)
                queue.enqueue(cell, priority)
                queued[cell] = priority
            elif queued and action < 0.7:
                cell = rng.choice(sorted(queued))
                new_priority = rng.randrange(0, queued[cell] + 1)
                queue.change(cell, queued[cell], new_priority)
                queued[cell] = new_priority
            else:
                cell = queue.dequeue()
                assert queued[cell] == min(queued.values())
                del queued[cell]
                free.append(cell)
            assert len(queue) == len(queued)
