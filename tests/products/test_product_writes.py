from datetime import datetime, timezone

import pytest

from src.api.products.models import CreateProductSchema, UpdateProductSchema
from src.shared.exceptions import ResourceNotFoundException, ValidationException


def _naive_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value.replace(tzinfo=None) if value.tzinfo else value


class TestPriceLedger:
    @pytest.mark.asyncio
    async def test_create_records_initial_price(self, catalog):
        started = datetime.now(timezone.utc).replace(tzinfo=None)

        product = await catalog.product_service.create_product(
            CreateProductSchema(
                name="Water Bath Case", description="Water-tight", price=16.83, quantity=23
            )
        )

        assert product.id == 1
        history = await catalog.pricing_service.get_prices(product.id)
        assert len(history) == 1
        assert history[0].price == 16.83
        assert _naive_utc(history[0].changed_at) >= started

    @pytest.mark.asyncio
    async def test_price_change_appends_one_entry(self, catalog, seeded_products):
        await catalog.product_service.update_product(1, UpdateProductSchema(price=9.99))

        history = await catalog.pricing_service.get_prices(1)
        assert [entry.price for entry in history] == [8.29, 9.99]
        assert history[0].changed_at <= history[1].changed_at

    @pytest.mark.asyncio
    async def test_same_price_does_not_append(self, catalog, seeded_products):
        await catalog.product_service.update_product(1, UpdateProductSchema(price=8.29))

        assert len(await catalog.pricing_service.get_prices(1)) == 1

    @pytest.mark.asyncio
    async def test_non_price_update_does_not_append(self, catalog, seeded_products):
        product = await catalog.product_service.update_product(
            2, UpdateProductSchema(name="Wrap it Cover", quantity=40)
        )

        assert product.name == "Wrap it Cover"
        assert product.quantity == 40
        assert product.price == 5.78
        assert len(await catalog.pricing_service.get_prices(2)) == 1

    @pytest.mark.asyncio
    async def test_stock_changes_leave_ledger_alone(self, catalog, seeded_products):
        await catalog.product_service.add_stock(1, 5)
        await catalog.product_service.add_stock(1, -9)

        assert (await catalog.product_service.get_product(1)).quantity == 0
        assert len(await catalog.pricing_service.get_prices(1)) == 1

    @pytest.mark.asyncio
    async def test_stock_cannot_go_negative(self, catalog, seeded_products):
        with pytest.raises(ValidationException):
            await catalog.product_service.add_stock(1, -5)

        assert (await catalog.product_service.get_product(1)).quantity == 4

    @pytest.mark.asyncio
    async def test_history_survives_delete(self, catalog, seeded_products):
        deleted = await catalog.product_service.delete_product(1)

        assert deleted.id == 1
        history = await catalog.pricing_service.get_prices(1)
        assert [entry.price for entry in history] == [8.29]

    @pytest.mark.asyncio
    async def test_all_prices_grouped_by_product(self, catalog, seeded_products):
        await catalog.product_service.update_product(1, UpdateProductSchema(price=9.99))

        history = await catalog.pricing_service.get_all_prices()
        assert [(e.product_id, e.price) for e in history] == [
            (1, 8.29),
            (1, 9.99),
            (2, 5.78),
        ]


class TestProductWriteValidation:
    @pytest.mark.asyncio
    async def test_empty_patch_is_invalid(self, catalog, seeded_products):
        with pytest.raises(ValidationException):
            await catalog.product_service.update_product(1, UpdateProductSchema())

    @pytest.mark.asyncio
    async def test_blank_name_is_invalid(self, catalog):
        with pytest.raises(ValidationException):
            await catalog.product_service.create_product(
                CreateProductSchema(name="   ", description="Cover", price=1.0)
            )

    @pytest.mark.asyncio
    async def test_update_unknown_product(self, catalog, seeded_products):
        with pytest.raises(ResourceNotFoundException):
            await catalog.product_service.update_product(
                999, UpdateProductSchema(price=1.0)
            )

        # Nothing was written for the unknown id
        with pytest.raises(ResourceNotFoundException):
            await catalog.pricing_service.get_prices(999)

    @pytest.mark.asyncio
    async def test_delete_unknown_product(self, catalog, seeded_products):
        with pytest.raises(ResourceNotFoundException):
            await catalog.product_service.delete_product(999)

    @pytest.mark.asyncio
    async def test_stock_for_unknown_product(self, catalog):
        with pytest.raises(ResourceNotFoundException):
            await catalog.product_service.add_stock(42, 1)
