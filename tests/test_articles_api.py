"""Tests for /api/articulos: listing filters, pagination, role-gated writes and soft delete."""

from tests.api_case import ApiTestCase

NEW_ARTICLE = {
    "sku": "FOAM-001",
    "descripcion": "Sandalia foamy azul",
    "categoria": "sandalias",
    "tipo_etiqueta": "qr",
    "color": "azul",
}


class TestCreateArticle(ApiTestCase):
    """POST /api/articulos (Administrador, Supervisor)."""

    def test_supervisor_creates_article(self) -> None:
        response = self.client.post(
            "/api/articulos", json=NEW_ARTICLE, headers=self.headers_for("supervisor")
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Artículo creado exitosamente")
        data = body["data"]
        self.assertEqual(data["sku"], "FOAM-001")
        self.assertEqual(data["tipo_etiqueta"], "qr")
        self.assertTrue(data["activo"])
        self.assertIsNone(data["size"])

    def test_duplicate_sku_is_rejected(self) -> None:
        self.add_article("FOAM-001")
        response = self.client.post(
            "/api/articulos", json=NEW_ARTICLE, headers=self.headers_for("admin")
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "message": "El SKU ya existe"})

    def test_missing_required_fields(self) -> None:
        response = self.client.post(
            "/api/articulos",
            json={"sku": "FOAM-002", "descripcion": "  "},
            headers=self.headers_for("admin"),
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(
            body["message"], "SKU, descripción, categoría y tipo de etiqueta son requeridos"
        )
        self.assertEqual(body["campos"], ["descripcion", "categoria", "tipo_etiqueta"])

    def test_invalid_label_type(self) -> None:
        payload = dict(NEW_ARTICLE, tipo_etiqueta="rfid")
        response = self.client.post(
            "/api/articulos", json=payload, headers=self.headers_for("admin")
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("Tipo de etiqueta inválido", response.json()["message"])

    def test_legacy_envio_label_type_is_stored_as_shipping(self) -> None:
        payload = dict(NEW_ARTICLE, tipo_etiqueta="Envio")
        response = self.client.post(
            "/api/articulos", json=payload, headers=self.headers_for("admin")
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["tipo_etiqueta"], "shipping")

    def test_operator_cannot_create(self) -> None:
        response = self.client.post(
            "/api/articulos", json=NEW_ARTICLE, headers=self.headers_for("operador")
        )
        self.assertEqual(response.status_code, 403)
        body = response.json()
        self.assertEqual(body["message"], "No tienes permisos para acceder a este recurso")
        self.assertEqual(body["rolRequerido"], ["Administrador", "Supervisor"])
        self.assertEqual(body["tuRol"], "Operador")


class TestReadArticles(ApiTestCase):
    """Listing and lookups are open to every authenticated role."""

    def test_listing_requires_authentication(self) -> None:
        response = self.client.get("/api/articulos")
        self.assertEqual(response.status_code, 401)

    def test_pagination_metadata(self) -> None:
        for i in range(5):
            self.add_article(f"SKU-{i}")
        response = self.client.get(
            "/api/articulos?page=1&limit=2", headers=self.headers_for("operador")
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body["data"]), 2)
        self.assertEqual(
            body["pagination"], {"page": 1, "limit": 2, "total": 5, "totalPages": 3}
        )
        # Newest first; rows created in the same instant fall back to id order.
        self.assertEqual([a["sku"] for a in body["data"]], ["SKU-4", "SKU-3"])

        last = self.client.get(
            "/api/articulos?page=3&limit=2", headers=self.headers_for("operador")
        ).json()
        self.assertEqual([a["sku"] for a in last["data"]], ["SKU-0"])

    def test_limit_is_capped(self) -> None:
        self.add_article("SKU-1")
        body = self.client.get(
            "/api/articulos?limit=5000", headers=self.headers_for("operador")
        ).json()
        self.assertEqual(body["pagination"]["limit"], 100)

    def test_page_below_one_is_rejected(self) -> None:
        response = self.client.get(
            "/api/articulos?page=0", headers=self.headers_for("operador")
        )
        self.assertEqual(response.status_code, 400)

    def test_huge_page_is_a_validation_error(self) -> None:
        response = self.client.get(
            "/api/articulos?page=100000000000000000000", headers=self.headers_for("operador")
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "El parámetro 'page' está fuera de rango")

        response = self.client.get(
            "/api/usuarios?page=100000000000000000000", headers=self.headers_for("admin")
        )
        self.assertEqual(response.status_code, 400)

    def test_unknown_label_type_filter_returns_empty_page(self) -> None:
        self.add_article("G-1", tipo_etiqueta="qr")
        response = self.client.get(
            "/api/articulos?tipo_etiqueta=rfid", headers=self.headers_for("operador")
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["data"], [])
        self.assertEqual(body["pagination"]["total"], 0)

    def test_legacy_label_type_filter(self) -> None:
        self.add_article("G-2", tipo_etiqueta="shipping")
        body = self.client.get(
            "/api/articulos?tipo_etiqueta=envio", headers=self.headers_for("operador")
        ).json()
        self.assertEqual([a["sku"] for a in body["data"]], ["G-2"])

    def test_search_folds_case_of_accented_letters(self) -> None:
        self.add_article("H-1", descripcion="ÁRBOL DE NAVIDAD")
        self.add_article("H-2", descripcion="Arbusto")
        body = self.client.get(
            "/api/articulos", params={"search": "árbol"}, headers=self.headers_for("operador")
        ).json()
        self.assertEqual([a["sku"] for a in body["data"]], ["H-1"])

    def test_filters_combine_with_and(self) -> None:
        self.add_article("A-1", categoria="sandalias", tipo_etiqueta="qr")
        self.add_article("A-2", categoria="sandalias", tipo_etiqueta="barcode")
        self.add_article("A-3", categoria="pantuflas", tipo_etiqueta="qr")
        self.add_article("A-4", categoria="sandalias", tipo_etiqueta="qr", activo=False)
        body = self.client.get(
            "/api/articulos?categoria=sandalias&tipo_etiqueta=qr&activo=true",
            headers=self.headers_for("operador"),
        ).json()
        self.assertEqual([a["sku"] for a in body["data"]], ["A-1"])
        self.assertEqual(body["pagination"]["total"], 1)

    def test_search_is_case_insensitive_and_literal(self) -> None:
        self.add_article("B-1", descripcion="Etiqueta 100% algodón")
        self.add_article("B-2", descripcion="Etiqueta 1000 piezas")
        self.add_article("pantufla-x", descripcion="Pantufla")
        body = self.client.get(
            "/api/articulos", params={"search": "100%"}, headers=self.headers_for("operador")
        ).json()
        self.assertEqual([a["sku"] for a in body["data"]], ["B-1"])

        body = self.client.get(
            "/api/articulos", params={"search": "PANTUFLA"}, headers=self.headers_for("operador")
        ).json()
        self.assertEqual([a["sku"] for a in body["data"]], ["pantufla-x"])

    def test_categories_are_distinct_sorted_and_active_only(self) -> None:
        self.add_article("C-1", categoria="sandalias")
        self.add_article("C-2", categoria="botas")
        self.add_article("C-3", categoria="sandalias")
        self.add_article("C-4", categoria="ocultas", activo=False)
        body = self.client.get(
            "/api/articulos/categorias", headers=self.headers_for("operador")
        ).json()
        self.assertEqual(body["data"], ["botas", "sandalias"])

    def test_get_by_id_and_sku(self) -> None:
        article_id = self.add_article("D-1")
        by_id = self.client.get(
            f"/api/articulos/{article_id}", headers=self.headers_for("operador")
        )
        self.assertEqual(by_id.status_code, 200)
        self.assertEqual(by_id.json()["data"]["sku"], "D-1")
        by_sku = self.client.get("/api/articulos/sku/D-1", headers=self.headers_for("operador"))
        self.assertEqual(by_sku.json()["data"]["id"], article_id)

    def test_unknown_article(self) -> None:
        response = self.client.get("/api/articulos/999", headers=self.headers_for("operador"))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Artículo no encontrado")
        response = self.client.get(
            "/api/articulos/sku/NOPE", headers=self.headers_for("operador")
        )
        self.assertEqual(response.status_code, 404)


class TestUpdateArticle(ApiTestCase):
    """PUT /api/articulos/{id} merges supplied fields into the stored row."""

    def test_partial_update_keeps_other_fields(self) -> None:
        article_id = self.add_article("E-1", color="rojo", categoria="botas")
        response = self.client.put(
            f"/api/articulos/{article_id}",
            json={"descripcion": "Bota roja"},
            headers=self.headers_for("supervisor"),
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["descripcion"], "Bota roja")
        self.assertEqual(data["color"], "rojo")
        self.assertEqual(data["categoria"], "botas")

    def test_empty_string_clears_optional_field(self) -> None:
        article_id = self.add_article("E-2", color="rojo")
        data = self.client.put(
            f"/api/articulos/{article_id}",
            json={"color": ""},
            headers=self.headers_for("admin"),
        ).json()["data"]
        self.assertIsNone(data["color"])

    def test_sku_taken_by_another_article(self) -> None:
        self.add_article("E-3")
        article_id = self.add_article("E-4")
        response = self.client.put(
            f"/api/articulos/{article_id}",
            json={"sku": "E-3"},
            headers=self.headers_for("admin"),
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "El SKU ya existe en otro artículo")

    def test_keeping_own_sku_is_allowed(self) -> None:
        article_id = self.add_article("E-5")
        response = self.client.put(
            f"/api/articulos/{article_id}",
            json={"sku": "E-5", "tipo_etiqueta": "barcode"},
            headers=self.headers_for("admin"),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["tipo_etiqueta"], "barcode")

    def test_unknown_article(self) -> None:
        response = self.client.put(
            "/api/articulos/999", json={"descripcion": "x"}, headers=self.headers_for("admin")
        )
        self.assertEqual(response.status_code, 404)


class TestDeleteAndStatus(ApiTestCase):
    """Soft delete and explicit status changes (Administrador only)."""

    def test_delete_is_soft(self) -> None:
        article_id = self.add_article("F-1")
        response = self.client.delete(
            f"/api/articulos/{article_id}", headers=self.headers_for("admin")
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Artículo desactivado exitosamente")

        still_there = self.client.get(
            f"/api/articulos/{article_id}", headers=self.headers_for("admin")
        ).json()["data"]
        self.assertFalse(still_there["activo"])

        inactive = self.client.get(
            "/api/articulos?activo=false", headers=self.headers_for("admin")
        ).json()
        self.assertEqual([a["id"] for a in inactive["data"]], [article_id])

    def test_supervisor_cannot_delete(self) -> None:
        article_id = self.add_article("F-2")
        response = self.client.delete(
            f"/api/articulos/{article_id}", headers=self.headers_for("supervisor")
        )
        self.assertEqual(response.status_code, 403)
        body = response.json()
        self.assertEqual(body["rolRequerido"], ["Administrador"])
        self.assertEqual(body["tuRol"], "Supervisor")

    def test_set_status_explicitly(self) -> None:
        article_id = self.add_article("F-3", activo=False)
        response = self.client.patch(
            f"/api/articulos/{article_id}/estado",
            json={"activo": True},
            headers=self.headers_for("admin"),
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Artículo activado exitosamente")
        self.assertTrue(body["data"]["activo"])

    def test_status_requires_activo(self) -> None:
        article_id = self.add_article("F-4")
        response = self.client.patch(
            f"/api/articulos/{article_id}/estado", json={}, headers=self.headers_for("admin")
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "El campo 'activo' es requerido")


class TestUnknownRoute(ApiTestCase):
    def test_unknown_route_reports_path(self) -> None:
        response = self.client.get("/api/no-existe")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(),
            {"success": False, "message": "Ruta no encontrada", "path": "/api/no-existe"},
        )
