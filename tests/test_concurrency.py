"""Racing reservations against one SQLite file from several threads."""

import threading

import pytest
from storefront.core.errors import InsufficientStock, OrderError
from storefront.services.ordering import OrderEngine, PlacedOrder

pytestmark = pytest.mark.concurrency


def _race(engine, requests):
    """Release every request at once; return results in request order."""
    barrier = threading.Barrier(len(requests))
    results = [None] * len(requests)

    def worker(index, items):
        barrier.wait()
        try:
            results[index] = engine.place_order(items)
        except OrderError as exc:
            results[index] = exc

    threads = [threading.Thread(target=worker, args=(i, items)) for i, items in enumerate(requests)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    assert not any(t.is_alive() for t in threads)
    return results


@pytest.fixture()
def engine(session_factory, catalog):
    return OrderEngine(session_factory, max_attempts=5)


class TestConcurrentReservations:
    def test_last_unit_goes_to_exactly_one_order(self, engine, read_state):
        results = _race(engine, [[{"productId": 3, "quantity": 1}]] * 2)

        placed = [r for r in results if isinstance(r, PlacedOrder)]
        rejected = [r for r in results if isinstance(r, InsufficientStock)]
        assert len(placed) == 1
        assert len(rejected) == 1
        assert (rejected[0].product_id, rejected[0].requested, rejected[0].available) == (3, 1, 0)

        stock, orders = read_state()
        assert stock[3] == 0
        assert [o for o in orders if any(line[0] == 3 for line in o[2])] == [
            (placed[0].order_id, 1999, [(3, 1, 1999)])
        ]

    @pytest.mark.parametrize("quantity, successes, left", [(1, 5, 0), (2, 2, 1), (3, 1, 2)])
    def test_no_oversell_under_contention(self, engine, read_state, quantity, successes, left):
        results = _race(engine, [[{"productId": 1, "quantity": quantity}]] * 10)

        placed = [r for r in results if isinstance(r, PlacedOrder)]
        assert len(placed) == successes
        assert all(isinstance(r, InsufficientStock) for r in results if r not in placed)

        stock, orders = read_state()
        assert stock[1] == left
        reserved = sum(q for _, _, lines in orders for pid, q, _ in lines if pid == 1)
        assert reserved == 5 - left

    def test_multi_product_orders_stay_consistent(self, engine, read_state):
        # each order needs one Gadget (stock 1) and one Widget; only one can win
        results = _race(engine, [[{"productId": 1}, {"productId": 2}]] * 4 + [[{"productId": 2}, {"productId": 1}]] * 4)

        placed = [r for r in results if isinstance(r, PlacedOrder)]
        assert len(placed) == 1
        stock, orders = read_state()
        assert (stock[1], stock[2]) == (4, 0)
        assert len(orders) == 1
