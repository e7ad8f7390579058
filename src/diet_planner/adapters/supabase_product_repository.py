"""Supabase implementation of the product catalog."""

from dataclasses import dataclass

from supabase import Client

from diet_planner.domain.nutrition import NutrientProfile, Product
from diet_planner.services.products import ProductRepository

_COLUMNS = "id, name, unit, unit_weight, calories, protein, fat, carbs, fiber"


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Reads products from the ``ingredients`` table."""

    client: Client

    def get_products(self, product_ids: list[str]) -> list[Product]:
        """Return the products that exist among ``product_ids``."""
        if not product_ids:
            return []
        response = (
            self.client.table("ingredients")
            .select(_COLUMNS)
            .in_("id", product_ids)
            .execute()
        )
        return [_parse_product(row) for row in response.data or []]


def _parse_product(row: dict[str, object]) -> Product:
    unit_weight = row.get("unit_weight")
    return Product(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        unit=str(row.get("unit") or "gramy"),
        unit_weight=float(unit_weight) if unit_weight is not None else None,
        profile=NutrientProfile(
            calories=float(row.get("calories") or 0.0),
            protein_g=float(row.get("protein") or 0.0),
            fat_g=float(row.get("fat") or 0.0),
            carbs_g=float(row.get("carbs") or 0.0),
            fiber_g=float(row.get("fiber") or 0.0),
        ),
    )
