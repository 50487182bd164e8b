import unittest

from inventory_api.db import CategoryRow, SqlDbClient, SupplierRow
from inventory_api.errors import DelegateError


class SqlDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL client logic.
    """

    def setUp(self):
        self.db = SqlDbClient("sqlite+pysqlite:///:memory:")
        with self.db.Session() as session:
            session.add_all(
                [SupplierRow(id=1, name="Acme"), CategoryRow(id=2, name="Bebidas")]
            )
            session.commit()

    def test_lists_suppliers_and_categories(self):
        self.assertEqual(self.db.list_suppliers(), [{"id": 1, "name": "Acme"}])
        self.assertEqual(self.db.list_categories(), [{"id": 2, "name": "Bebidas"}])

    def test_insert_and_list_joined(self):
        self.db.insert_product(
            {
                "id": 10,
                "name": "Café",
                "amount": 3,
                "price": 12.5,
                "idsupplier": 1,
                "idcategorie": 2,
            }
        )
        self.db.insert_product({"id": 11, "name": "Chá", "amount": 1, "price": 4.0})
        rows = self.db.list_products()
        self.assertEqual([row["id"] for row in rows], [10, 11])
        self.assertEqual(rows[0]["supplier_name"], "Acme")
        self.assertEqual(rows[0]["category_name"], "Bebidas")
        self.assertIsNone(rows[1]["supplier_name"])
        self.assertIsNone(rows[1]["coastprice"])

    def test_update_with_path_id(self):
        self.db.insert_product({"id": 10, "name": "Café", "amount": 3, "price": 12.5})
        self.db.update_product("10", {"amount": 7, "lastupdate": "2024-06-01"})
        row = self.db.list_products()[0]
        self.assertEqual(row["amount"], 7)
        self.assertEqual(row["lastupdate"], "2024-06-01")

    def test_delete(self):
        self.db.insert_product({"id": 10, "name": "Café", "amount": 3, "price": 12.5})
        self.db.delete_product("10")
        self.assertEqual(self.db.list_products(), [])

    def test_duplicate_insert_is_a_delegate_error(self):
        row = {"id": 10, "name": "Café", "amount": 3, "price": 12.5}
        self.db.insert_product(row)
        with self.assertRaises(DelegateError):
            self.db.insert_product(row)

    def test_unknown_column_is_a_delegate_error(self):
        self.db.insert_product({"id": 10, "name": "Café", "amount": 3, "price": 12.5})
        with self.assertRaises(DelegateError):
            self.db.update_product("10", {"colour": "blue"})

    def test_requires_url(self):
        with self.assertRaises(ValueError):
            SqlDbClient("")


if __name__ == "__main__":
    unittest.main()
