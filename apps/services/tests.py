from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.cores.testing import make_user, make_freelancer
from .models import Service, ServiceCategory


class MarketplaceAPITest(APITestCase):
    def setUp(self):
        self.top = make_freelancer("top@example.com", avg_rating=Decimal("4.90"), total_jobs=3)
        self.busy = make_freelancer("busy@example.com", avg_rating=Decimal("4.00"), total_jobs=40)
        Service.objects.create(
            provider=self.top, title="เดินสายไฟ", price_thb=Decimal("1000"), category=ServiceCategory.ELECTRIC
        )
        Service.objects.create(
            provider=self.busy, title="ล้างท่อ", price_thb=Decimal("350"), category=ServiceCategory.PLUMBING
        )

    def titles(self, **params):
        response = self.client.get(reverse("service-marketplace"), params)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return [row["title"] for row in response.data]

    def test_public_and_sorted_by_rating(self):
        self.assertEqual(self.titles(), ["เดินสายไฟ", "ล้างท่อ"])

    def test_sort_options(self):
        self.assertEqual(self.titles(sort="price_asc"), ["ล้างท่อ", "เดินสายไฟ"])
        self.assertEqual(self.titles(sort="price_desc"), ["เดินสายไฟ", "ล้างท่อ"])
        self.assertEqual(self.titles(sort="jobs"), ["ล้างท่อ", "เดินสายไฟ"])

    def test_filter_by_category(self):
        self.assertEqual(self.titles(category=ServiceCategory.PLUMBING), ["ล้างท่อ"])

    def test_items_carry_fee_quote(self):
        response = self.client.get(reverse("service-marketplace"), {"category": ServiceCategory.PLUMBING})
        item = response.data[0]
        self.assertEqual(item["fee_amount"], Decimal("11"))
        self.assertEqual(item["total"], Decimal("361"))
        self.assertEqual(item["category_emoji"], "🚿")
        self.assertEqual(item["provider"]["full_name"], "busy")


class ManageServicesAPITest(APITestCase):
    def setUp(self):
        self.freelancer = make_freelancer("fixer@example.com")
        self.client.force_authenticate(self.freelancer)

    def test_create_and_list_own(self):
        response = self.client.post(
            reverse("service-manage"),
            {"title": "ทาสีรั้ว", "price_thb": "800", "category": ServiceCategory.PAINT},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        other = make_freelancer("other@example.com")
        Service.objects.create(provider=other, title="ขนของ", price_thb=Decimal("500"))

        response = self.client.get(reverse("service-manage"))
        self.assertEqual([row["title"] for row in response.data], ["ทาสีรั้ว"])

    def test_validation(self):
        response = self.client.post(reverse("service-manage"), {"title": " ", "price_thb": "0"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("title", response.data)
        self.assertIn("price_thb", response.data)

    def test_delete_only_own(self):
        mine = Service.objects.create(provider=self.freelancer, title="ตัดหญ้า", price_thb=Decimal("300"))
        theirs = Service.objects.create(
            provider=make_freelancer("other@example.com"), title="ขนของ", price_thb=Decimal("500")
        )

        response = self.client.delete(reverse("service-manage-detail", args=[theirs.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.delete(reverse("service-manage-detail", args=[mine.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Service.objects.filter(pk=mine.pk).exists())

    def test_customer_mode_cannot_manage(self):
        self.client.force_authenticate(make_user("buyer@example.com"))
        response = self.client.get(reverse("service-manage"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
