from decimal import Decimal

import pytest

from backend.app.errors import ConflictingData, DataNotFound, Internal, InvalidCredentials, NoUpdatedData
from backend.app.security import verify_password


def test_category_create_caches_entity_and_drops_list_pages(services, redis_client):
    services.categories.list_categories(0, 10)
    assert "categories:0-10" in redis_client.store

    category = services.categories.create_category("Snacks")

    assert f"category:{category.id}" in redis_client.store
    assert "categories:0-10" not in redis_client.store


def test_category_get_is_cache_aside(services, repos):
    category = services.categories.create_category("Snacks")
    repos["categories"].table.rows.clear()
    assert services.categories.get_category(category.id).name == "Snacks"


def test_category_get_missing_is_not_found(services):
    with pytest.raises(DataNotFound):
        services.categories.get_category(7)


def test_category_duplicate_name_conflicts(services):
    services.categories.create_category("Snacks")
    with pytest.raises(ConflictingData):
        services.categories.create_category("Snacks")


def test_category_identical_update_writes_nothing(services, repos, redis_client):
    category = services.categories.create_category("Snacks")
    db_writes, cache_writes = repos["categories"].table.writes, redis_client.writes

    with pytest.raises(NoUpdatedData):
        services.categories.update_category(category.id, {"name": "Snacks"})
    with pytest.raises(NoUpdatedData):
        services.categories.update_category(category.id, {})

    assert repos["categories"].table.writes == db_writes
    assert redis_client.writes == cache_writes


def test_category_update_refreshes_cache(services, redis_client):
    category = services.categories.create_category("Snacks")
    services.categories.list_categories(0, 10)

    updated = services.categories.update_category(category.id, {"name": "Sweets"})

    assert updated.name == "Sweets"
    assert b"Sweets" in redis_client.store[f"category:{category.id}"]
    assert "categories:0-10" not in redis_client.store


def test_category_delete_evicts(services, redis_client):
    category = services.categories.create_category("Snacks")
    services.categories.delete_category(category.id)
    assert f"category:{category.id}" not in redis_client.store
    with pytest.raises(DataNotFound):
        services.categories.get_category(category.id)


def test_unexpected_repository_failure_becomes_internal(services, repos):
    repos["categories"].fail_with = RuntimeError("connection reset")
    with pytest.raises(Internal):
        services.categories.create_category("Snacks")


def test_undecodable_cache_entry_is_a_miss(services, redis_client):
    category = services.categories.create_category("Snacks")
    redis_client.store[f"category:{category.id}"] = b"not json"
    assert services.categories.get_category(category.id).name == "Snacks"


def test_payment_update_allows_clearing_logo(services):
    payment = services.payments.create_payment("QRIS", "E-WALLET", "qris.png")
    updated = services.payments.update_payment(payment.id, {"logo": None})
    assert updated.logo is None
    assert services.payments.get_payment(payment.id).logo is None


def test_payment_list_pages(services):
    for name in ("Cash", "Card", "QRIS"):
        services.payments.create_payment(name, "CASH")
    assert [p.name for p in services.payments.list_payments(1, 5)] == ["Card", "QRIS"]


def test_user_register_hashes_password_once(services, repos):
    user = services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    stored = repos["users"].get_user_by_id(user.id)
    assert stored.password != "s3cret-pass"
    assert verify_password("s3cret-pass", stored.password)
    assert user.role == "cashier"


def test_user_register_duplicate_email_conflicts(services):
    services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    with pytest.raises(ConflictingData):
        services.users.register("Other", "ana@pos.local", "s3cret-pass")


def test_user_cache_entry_has_no_password(services, redis_client):
    user = services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    assert b"password" not in redis_client.store[f"user:{user.id}"]


def test_user_update_with_same_password_is_no_change(services):
    user = services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    with pytest.raises(NoUpdatedData):
        services.users.update_user(user.id, {"name": "Ana", "password": "s3cret-pass"})


def test_user_update_rehashes_new_password(services, repos):
    user = services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    services.users.update_user(user.id, {"password": "another-pass"})
    stored = repos["users"].get_user_by_id(user.id)
    assert verify_password("another-pass", stored.password)
    assert not verify_password("s3cret-pass", stored.password)


def test_user_update_role(services):
    user = services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    assert services.users.update_user(user.id, {"role": "admin"}).role == "admin"


def test_user_delete_missing_is_not_found(services):
    with pytest.raises(DataNotFound):
        services.users.delete_user(3)


def test_product_create_requires_existing_category(services):
    with pytest.raises(DataNotFound):
        services.products.create_product(99, "Tea", Decimal("5"), 1)


def test_product_is_returned_with_category(services, shop):
    product = services.products.get_product(shop["tea"].id)
    assert product.category.name == "Drinks"


def test_product_list_filters_and_keys_by_filters(services, redis_client, shop):
    found = services.products.list_products(0, 10, category_id=shop["category"].id, search="cof")
    assert [p.name for p in found] == ["Coffee"]
    assert found[0].category.name == "Drinks"
    assert f"products:0-10-{shop['category'].id}-cof" in redis_client.store


def test_product_update_with_unknown_category_is_not_found(services, repos, shop):
    with pytest.raises(DataNotFound):
        services.products.update_product(shop["tea"].id, {"category_id": 99})
    assert repos["products"].get_product_by_id(shop["tea"].id).category_id == shop["category"].id


def test_product_update_stock_to_zero(services, shop):
    product = services.products.update_product(shop["tea"].id, {"stock": 0})
    assert product.stock == 0
    assert services.products.get_product(shop["tea"].id).stock == 0


def test_product_delete_then_get_is_not_found(services, shop):
    services.products.delete_product(shop["coffee"].id)
    with pytest.raises(DataNotFound):
        services.products.get_product(shop["coffee"].id)


def test_login_returns_verifiable_token(services):
    user = services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    token = services.auth.login("ana@pos.local", "s3cret-pass")
    payload = services.tokens.verify_token(token)
    assert payload.user_id == user.id
    assert payload.role == "cashier"


@pytest.mark.parametrize("email,password", [("ana@pos.local", "wrong-pass"), ("nobody@pos.local", "s3cret-pass")])
def test_login_rejects_bad_credentials(services, email, password):
    services.users.register("Ana", "ana@pos.local", "s3cret-pass")
    with pytest.raises(InvalidCredentials):
        services.auth.login(email, password)


def test_register_accepts_password_shaped_like_a_hash(services, repos):
    password = "$2b$12$" + "a" * 53
    user = services.users.register("Eve", "eve@pos.local", password)

    stored = repos["users"].get_user_by_id(user.id).password
    assert stored != password
    assert verify_password(password, stored)
    assert services.tokens.verify_token(services.auth.login("eve@pos.local", password)).user_id == user.id


def test_user_update_accepts_password_shaped_like_a_hash(services, repos):
    user = services.users.register("Eve", "eve@pos.local", "s3cret-pass")
    password = "$2b$12$" + "b" * 53
    services.users.update_user(user.id, {"password": password})
    assert verify_password(password, repos["users"].get_user_by_id(user.id).password)
