"""
Tests for the storefront cart: replace, totals, shipping and item edits.
"""

import pytest
from httpx import AsyncClient

from app.core.errors import NotFoundError
from app.models.cart import CART_STATUS_CHECKOUT
from app.schemas.cart import CartReplaceRequest
from app.services import cart_service

TOKEN = "storefront-token-1"


def cart_payload(company, event, ticket, quantity=2, price="100.00", token=TOKEN) -> dict:
    return {
        "sessionToken": token,
        "company_id": str(company.id),
        "event_id": str(event.id),
        "items": [{"ticket_id": str(ticket.id), "price": price, "quantity": quantity}],
    }


@pytest.mark.asyncio
async def test_replace_cart(client: AsyncClient, company, test_event, test_ticket):
    response = await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Carrinho atualizado com sucesso."
    assert data["company_id"] == str(company.id)
    assert data["event_id"] == str(test_event.id)
    assert len(data["items"]) == 1
    assert data["totals"] == [
        {
            "total_items": 1,
            "total_quantity": 2,
            "total_amount": 200.0,
            "shipping_total": 0.0,
            "grand_total": 200.0,
            "currency": "BRL",
        }
    ]


@pytest.mark.asyncio
async def test_replace_discards_previous_items(client: AsyncClient, company, test_event, test_ticket):
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket, quantity=5))
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket, quantity=1))

    response = await client.get("/api/v1/carts", params={"sessionToken": TOKEN})
    data = response.json()
    assert data["message"] == "Carrinho recuperado com sucesso."
    assert [item["quantity"] for item in data["items"]] == [1]
    assert data["totals"][0]["total_amount"] == 100.0


@pytest.mark.asyncio
async def test_empty_cart(client: AsyncClient, database):
    response = await client.get("/api/v1/carts", params={"sessionToken": "nada"})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Carrinho vazio."
    assert data["items"] == []
    assert data["totals"] == []
    assert data["company_id"] is None


@pytest.mark.asyncio
async def test_cart_requires_session_token(client: AsyncClient, database):
    response = await client.get("/api/v1/carts")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cart_event_is_immutable(client: AsyncClient, admin_headers, company, test_event, test_ticket):
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))
    other = await client.post("/api/v1/events", json={"event_name": "Outro Show"}, headers=admin_headers)

    payload = cart_payload(company, test_event, test_ticket)
    payload["event_id"] = other.json()["id"]
    response = await client.post("/api/v1/carts", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == (
        "Não é possível alterar company_id ou event_id de um carrinho existente."
    )


@pytest.mark.asyncio
async def test_cart_ticket_must_belong_to_event(client: AsyncClient, admin_headers, company, test_ticket):
    other = await client.post("/api/v1/events", json={"event_name": "Outro Show"}, headers=admin_headers)

    payload = {
        "sessionToken": TOKEN,
        "company_id": str(company.id),
        "event_id": other.json()["id"],
        "items": [{"ticket_id": str(test_ticket.id), "price": "100.00", "quantity": 1}],
    }
    response = await client.post("/api/v1/carts", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Um dos ingressos não pertence ao evento informado."


@pytest.mark.asyncio
async def test_cart_price_must_match(client: AsyncClient, company, test_event, test_ticket):
    response = await client.post(
        "/api/v1/carts",
        json=cart_payload(company, test_event, test_ticket, price="90.00"),
    )
    assert response.status_code == 400
    assert "não confere com o preço atual" in response.json()["message"]


@pytest.mark.asyncio
async def test_cart_insufficient_stock(client: AsyncClient, company, test_event, test_ticket):
    response = await client.post(
        "/api/v1/carts",
        json=cart_payload(company, test_event, test_ticket, quantity=101),
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Estoque insuficiente. Disponível: 100, Solicitado: 101."


@pytest.mark.asyncio
async def test_cart_inactive_ticket(client: AsyncClient, admin_headers, company, test_event, test_ticket):
    await client.patch(f"/api/v1/tickets/{test_ticket.id}", json={"is_active": False}, headers=admin_headers)

    response = await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))
    assert response.status_code == 400
    assert response.json()["message"] == "Este ingresso não está mais disponível para venda."


@pytest.mark.asyncio
async def test_cart_ticket_of_other_company(client: AsyncClient, other_company, test_event, test_ticket):
    response = await client.post("/api/v1/carts", json=cart_payload(other_company, test_event, test_ticket))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_failed_replace_keeps_previous_items(client: AsyncClient, company, test_event, test_ticket):
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket, quantity=3))
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket, quantity=500))

    response = await client.get("/api/v1/carts", params={"sessionToken": TOKEN})
    assert [item["quantity"] for item in response.json()["items"]] == [3]


@pytest.mark.asyncio
async def test_home_shipping(client: AsyncClient, company, test_event, test_ticket):
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))

    response = await client.post(
        "/api/v1/carts/shipping",
        json={"sessionToken": TOKEN, "shipping_method": "home"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["shipping"]["method"] == "home"
    assert data["shipping"]["price"] == 25.0
    assert data["totals"][0]["shipping_total"] == 25.0
    assert data["totals"][0]["grand_total"] == 225.0


@pytest.mark.asyncio
async def test_shipping_survives_replace(client: AsyncClient, company, test_event, test_ticket):
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))
    await client.post("/api/v1/carts/shipping", json={"sessionToken": TOKEN, "shipping_method": "home"})
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket, quantity=1))

    response = await client.get("/api/v1/carts", params={"sessionToken": TOKEN})
    assert response.json()["totals"][0]["grand_total"] == 125.0


@pytest.mark.asyncio
async def test_shipping_invalid_method(client: AsyncClient, company, test_event, test_ticket):
    await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))

    response = await client.post(
        "/api/v1/carts/shipping",
        json={"sessionToken": TOKEN, "shipping_method": "drone"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_shipping_on_empty_cart(client: AsyncClient, database):
    response = await client.post(
        "/api/v1/carts/shipping",
        json={"sessionToken": "vazio", "shipping_method": "digital"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_item_quantity(client: AsyncClient, company, test_event, test_ticket):
    created = await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))
    cart_id = created.json()["items"][0]["id"]

    response = await client.patch(f"/api/v1/carts/{cart_id}", json={"sessionToken": TOKEN, "quantity": 4})
    assert response.status_code == 200
    assert response.json()["quantity"] == 4

    response = await client.patch(f"/api/v1/carts/{cart_id}", json={"sessionToken": TOKEN, "quantity": 101})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_item_with_wrong_token(client: AsyncClient, company, test_event, test_ticket):
    created = await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))
    cart_id = created.json()["items"][0]["id"]

    response = await client.patch(f"/api/v1/carts/{cart_id}", json={"sessionToken": "outro", "quantity": 1})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_item(client: AsyncClient, company, test_event, test_ticket):
    created = await client.post("/api/v1/carts", json=cart_payload(company, test_event, test_ticket))
    cart_id = created.json()["items"][0]["id"]

    response = await client.delete(f"/api/v1/carts/{cart_id}", params={"sessionToken": TOKEN})
    assert response.status_code == 200
    assert response.json()["id"] == cart_id

    response = await client.get("/api/v1/carts", params={"sessionToken": TOKEN})
    assert response.json()["items"] == []

    response = await client.delete(f"/api/v1/carts/{cart_id}", params={"sessionToken": TOKEN})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_item_status(db_session, company, test_event, test_ticket):
    items = await cart_service.replace(
        db_session, CartReplaceRequest(**cart_payload(company, test_event, test_ticket))
    )

    item = await cart_service.update_status(db_session, items[0].id, CART_STATUS_CHECKOUT, TOKEN)
    assert item.status == CART_STATUS_CHECKOUT
    assert await cart_service.find_by_session_token(db_session, TOKEN) == []

    with pytest.raises(NotFoundError):
        await cart_service.update_status(db_session, items[0].id, CART_STATUS_CHECKOUT, "outro-token")
