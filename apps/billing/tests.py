from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from .fees import calculate_fee, quote_price


class CalculateFeeTest(TestCase):
    def test_fee_rounds_up_to_whole_baht(self):
        self.assertEqual(calculate_fee(350), Decimal("11"))
        self.assertEqual(calculate_fee(Decimal("1")), Decimal("1"))

    def test_exact_multiples_are_not_bumped(self):
        self.assertEqual(calculate_fee(1000), Decimal("30"))
        self.assertEqual(calculate_fee(700), Decimal("21"))
        self.assertEqual(calculate_fee(100), Decimal("3"))

    def test_float_input_has_no_binary_drift(self):
        self.assertEqual(calculate_fee(700.0), Decimal("21"))
        self.assertEqual(calculate_fee(0.1), Decimal("1"))

    def test_zero_and_negative_prices_have_no_fee(self):
        self.assertEqual(calculate_fee(0), Decimal("0"))
        self.assertEqual(calculate_fee(-50), Decimal("0"))
        self.assertEqual(calculate_fee(None), Decimal("0"))


class QuotePriceTest(TestCase):
    def test_total_is_price_plus_fee(self):
        quote = quote_price(350)
        self.assertEqual(quote["fee_amount"], Decimal("11"))
        self.assertEqual(quote["total"], Decimal("361"))
        self.assertTrue(quote["display"])

        quote = quote_price("1000")
        self.assertEqual(quote["fee_amount"], Decimal("30"))
        self.assertEqual(quote["total"], Decimal("1030"))

    def test_nothing_to_display_without_a_price(self):
        quote = quote_price(0)
        self.assertEqual(quote["fee_amount"], Decimal("0"))
        self.assertEqual(quote["total"], Decimal("0"))
        self.assertFalse(quote["display"])


class FeeQuoteAPITest(APITestCase):
    def test_quote_is_public(self):
        response = self.client.get(reverse("fee-quote"), {"price": "350"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["fee_amount"], "11")
        self.assertEqual(response.data["total"], "361.00")
        self.assertTrue(response.data["display"])

    def test_missing_price_quotes_zero(self):
        response = self.client.get(reverse("fee-quote"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["fee_amount"], "0")
        self.assertFalse(response.data["display"])

    def test_garbage_price_is_rejected(self):
        response = self.client.get(reverse("fee-quote"), {"price": "abc"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
