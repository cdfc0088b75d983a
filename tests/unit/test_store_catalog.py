from store.catalog import PRODUCTS, StoreUser, UserDirectory, list_products


def test_directory_is_seeded_with_three_users():
    directory = UserDirectory()
    assert [directory.get(user_id).name for user_id in (1, 2, 3)] == ["Alice Johnson", "Bob Smith", "Charlie Lee"]
    assert directory.get(1).role == "admin"
    assert directory.get(2).role == "customer"
    assert directory.get(99) is None


def test_create_defaults_role_and_takes_next_id():
    directory = UserDirectory()
    user = directory.create(name="Dana", email="dana@example.com")
    assert user.to_payload() == {"id": 4, "name": "Dana", "email": "dana@example.com", "role": "customer"}
    assert directory.get(4) == user


def test_next_id_follows_highest_id_not_count():
    directory = UserDirectory(
        users=[
            StoreUser(id=1, name="Alice Johnson", email="alice@example.com", role="admin"),
            StoreUser(id=3, name="Charlie Lee", email="charlie@example.com"),
        ]
    )
    user = directory.create(name="Eve", email="eve@example.com", role="admin")
    assert user.id == 4
    assert user.role == "admin"
    assert directory.get(3).name == "Charlie Lee"


def test_empty_directory_starts_at_one():
    assert UserDirectory(users=[]).create(name="First", email="first@example.com").id == 1


def test_list_products_returns_copies():
    products = list_products()
    products[0]["price"] = 0
    assert len(products) == 5
    assert PRODUCTS[0]["price"] == 25.99
