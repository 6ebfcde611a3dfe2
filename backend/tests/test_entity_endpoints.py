"""The same CRUD contract checked against every entity router."""

import uuid

import pytest

APPLE_IMAGE = "https://raw.githubusercontent.com/GeoZac/static_iamge_dump/master/apple_image.png"


def _fruit_product(client):
    fruit = client.post(
        "/Fruit", json={"fruitImageUrl": APPLE_IMAGE, "fruitName": "Apple", "fruitVendor": "Daily Fresh"}
    ).json()
    return {"costPrice": 100.0, "fruitId": fruit["id"], "packagedQuantity": "1kg", "sellingPrice": 95.0}


# prefix -> (build payload, changed field, changed value, first required field, missing id)
ENTITIES = {
    "Heater": (lambda client: {"text": "some text"}, "text", "Updated text", "text", "999"),
    "Fruit": (
        lambda client: {"fruitImageUrl": APPLE_IMAGE, "fruitName": "Apple", "fruitVendor": "Daily Fresh"},
        "fruitName", "Pear", "fruitImageUrl", "999",
    ),
    "Offer": (
        lambda client: {"badgeColor": "0xffc62828", "description": "50% OFF"},
        "description", "20% OFF", "badgeColor", "999",
    ),
    "FruitProduct": (_fruit_product, "packagedQuantity", "3kg", "costPrice", "999"),
    "SensorLocation": (
        lambda client: {
            "sensorLocationText": "Parthenon",
            "latitude": 37.9715,
            "longitude": 23.7269,
            "sensorLocationType": "OUTDOOR",
        },
        "sensorLocationText", "Acropolis", "sensorLocationText", str(uuid.uuid4()),
    ),
    "SensorSystem": (lambda client: {"sensorName": "Weather station"}, "sensorName", "Renamed", "sensorName",
                     str(uuid.uuid4())),
}

entity_params = pytest.mark.parametrize("prefix", list(ENTITIES))


@entity_params
def test_create_find_update_delete(auth_client, prefix):
    build, field, value, _, _ = ENTITIES[prefix]
    payload = build(auth_client)

    created = auth_client.post(f"/{prefix}", json=payload)
    assert created.status_code == 201
    entity_id = created.json()["id"]
    assert entity_id is not None

    found = auth_client.get(f"/{prefix}/{entity_id}")
    assert found.status_code == 200
    assert found.json() == created.json()

    updated = auth_client.put(f"/{prefix}/{entity_id}", json={**payload, field: value})
    assert updated.status_code == 200
    assert updated.json()["id"] == entity_id
    assert updated.json()[field] == value
    assert auth_client.get(f"/{prefix}/{entity_id}").json()[field] == value

    deleted = auth_client.delete(f"/{prefix}/{entity_id}")
    assert deleted.status_code == 200
    assert deleted.json()[field] == value
    assert auth_client.get(f"/{prefix}/{entity_id}").status_code == 404


@entity_params
def test_create_without_required_field_is_400(auth_client, prefix):
    _, _, _, required, _ = ENTITIES[prefix]
    r = auth_client.post(f"/{prefix}", json={})
    assert r.status_code == 400
    assert r.headers["content-type"] == "application/problem+json"
    body = r.json()
    assert body["title"] == "Constraint Violation"
    assert body["violations"][0]["field"] == required
    assert auth_client.get(f"/{prefix}").json()["totalElements"] == 0


@entity_params
def test_update_with_missing_required_field_is_400(auth_client, prefix):
    build, _, _, required, _ = ENTITIES[prefix]
    payload = build(auth_client)
    entity_id = auth_client.post(f"/{prefix}", json=payload).json()["id"]
    r = auth_client.put(f"/{prefix}/{entity_id}", json={**payload, required: None})
    assert r.status_code == 400
    assert r.json()["violations"][0]["field"] == required


@entity_params
def test_non_existing_id_is_404(auth_client, prefix):
    build, _, _, _, missing_id = ENTITIES[prefix]
    payload = build(auth_client)
    assert auth_client.get(f"/{prefix}/{missing_id}").status_code == 404
    assert auth_client.put(f"/{prefix}/{missing_id}", json=payload).status_code == 404
    assert auth_client.delete(f"/{prefix}/{missing_id}").status_code == 404


@entity_params
def test_list_is_public_and_paged(client, prefix):
    r = client.get(f"/{prefix}")
    assert r.status_code == 200
    body = r.json()
    assert body["data"] == []
    assert body["totalPages"] == 0
    assert body["isFirst"] is True and body["isLast"] is True
