import threading
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase, override_settings

from orders import services
from orders.models import Order, OrderSequenceCounter
from orders.sequence import assign_order_number, format_order_number, next_order_number

User = get_user_model()


def order_payload(**extra):
    data = {"client_name": "Ravi", "dishes": [{"name": "Samosa", "quantity": 10, "unit_price": 12}]}
    data.update(extra)
    return data


class OrderNumberFormatTests(TestCase):
    def test_zero_padded_to_five_digits(self):
        self.assertEqual(format_order_number(1), "ORD-00001")
        self.assertEqual(format_order_number(123), "ORD-00123")

    def test_wider_numbers_are_not_truncated(self):
        self.assertEqual(format_order_number(123456), "ORD-123456")

    @override_settings(ORDER_NUMBER_PREFIX="QT", ORDER_NUMBER_WIDTH=3)
    def test_prefix_and_width_from_settings(self):
        self.assertEqual(format_order_number(7), "QT-007")


class OrderSequenceTests(TestCase):
    def setUp(self):
        self.cook = User.objects.create_user("cook", "cook@example.com", "pass1234")
        self.other = User.objects.create_user("other", "other@example.com", "pass1234")

    def test_first_and_second_order_of_new_cook(self):
        first = services.create_order(self.cook, order_payload())
        second = services.create_order(self.cook, order_payload())
        self.assertEqual(first.order_number, "ORD-00001")
        self.assertEqual(second.order_number, "ORD-00002")

    def test_counters_are_independent_per_cook(self):
        services.create_order(self.cook, order_payload())
        services.create_order(self.cook, order_payload())
        other = services.create_order(self.other, order_payload())
        self.assertEqual(other.order_number, "ORD-00001")

    def test_sequential_creations_are_gapless(self):
        numbers = [services.create_order(self.cook, order_payload()).order_number for _ in range(5)]
        self.assertEqual(numbers, [format_order_number(i) for i in range(1, 6)])
        self.assertEqual(OrderSequenceCounter.objects.get(cook=self.cook).seq, 5)

    def test_next_order_number_creates_counter_lazily(self):
        self.assertFalse(OrderSequenceCounter.objects.filter(cook=self.cook).exists())
        self.assertEqual(next_order_number(self.cook.id), "ORD-00001")
        self.assertTrue(OrderSequenceCounter.objects.filter(cook=self.cook).exists())

    def test_assign_skips_already_numbered_order(self):
        order = Order(cook=self.cook, client_name="Ravi", order_number="ORD-00042")
        self.assertFalse(assign_order_number(order))
        self.assertEqual(order.order_number, "ORD-00042")
        self.assertFalse(OrderSequenceCounter.objects.filter(cook=self.cook).exists())

    def test_failed_creation_does_not_consume_a_number(self):
        with mock.patch(
            "orders.services.OrderLine.objects.bulk_create", side_effect=DatabaseError("disk full")
        ):
            with self.assertRaises(DatabaseError):
                services.create_order(self.cook, order_payload())

        self.assertFalse(Order.objects.filter(cook=self.cook).exists())
        created = services.create_order(self.cook, order_payload())
        self.assertEqual(created.order_number, "ORD-00001")


class ConcurrentOrderNumberingTests(TransactionTestCase):
    workers = 8

    def setUp(self):
        if connection.vendor == "sqlite" and connection.is_in_memory_db():
            self.skipTest("threads need a file-backed test database")
        self.cook = User.objects.create_user("cook", "cook@example.com", "pass1234")

    def test_parallel_creations_for_one_cook_get_distinct_gapless_numbers(self):
        numbers, errors = [], []
        lock = threading.Lock()
        start = threading.Barrier(self.workers)

        def create():
            try:
                start.wait()
                order = services.create_order(self.cook, order_payload())
                with lock:
                    numbers.append(order.order_number)
            except Exception as exc:
                with lock:
                    errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=create) for _ in range(self.workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(sorted(numbers), [format_order_number(i) for i in range(1, self.workers + 1)])
        self.assertEqual(OrderSequenceCounter.objects.get(cook=self.cook).seq, self.workers)
        self.assertEqual(Order.objects.filter(cook=self.cook).count(), self.workers)
