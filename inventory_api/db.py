"""
Database abstraction for the hosted catalog (Supabase), a plain SQLAlchemy
database and an in-memory test implementation.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional, Protocol

from postgrest.exceptions import APIError
from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased, declarative_base, sessionmaker
from supabase import Client

from inventory_api.errors import DelegateError


PRODUCTS_TABLE = "products"
SUPPLIERS_TABLE = "supplier"
CATEGORIES_TABLE = "categories"

REQUIRED_PRODUCT_COLUMNS = ("id", "name", "amount", "price")
OPTIONAL_PRODUCT_COLUMNS = (
    "coastprice",
    "lastpurchase",
    "idsupplier",
    "lastupdate",
    "idcategorie",
)
PRODUCT_COLUMNS = REQUIRED_PRODUCT_COLUMNS + OPTIONAL_PRODUCT_COLUMNS

# PostgREST embeds referenced rows by table name; listings flatten them.
PRODUCTS_JOINED_SELECT = f"*, {CATEGORIES_TABLE}(name), {SUPPLIERS_TABLE}(name)"


class DbClient(Protocol):
    """Interface for catalog access."""

    def list_products(self) -> list[dict]:
        ...

    def list_suppliers(self) -> list[dict]:
        ...

    def list_categories(self) -> list[dict]:
        ...

    def insert_product(self, row: dict) -> None:
        ...

    def update_product(self, product_id: str, fields: dict) -> None:
        ...

    def delete_product(self, product_id: str) -> None:
        ...


def _key(value: Any) -> str:
    return str(value)


class InMemoryDbClient:
    """Simple in-memory catalog for development and tests."""

    def __init__(self):
        self.products: Dict[str, dict] = {}
        self.suppliers: Dict[str, dict] = {}
        self.categories: Dict[str, dict] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.products.clear()
        self.suppliers.clear()
        self.categories.clear()

    def add_supplier(self, supplier_id: Any, name: str) -> None:
        self.suppliers[_key(supplier_id)] = {"id": supplier_id, "name": name}

    def add_category(self, category_id: Any, name: str) -> None:
        self.categories[_key(category_id)] = {"id": category_id, "name": name}

    def _name_of(self, table: Dict[str, dict], ref: Any) -> Optional[str]:
        if ref is None:
            return None
        row = table.get(_key(ref))
        return row["name"] if row else None

    def list_products(self) -> list[dict]:
        rows = []
        for product in self.products.values():
            row = {column: None for column in PRODUCT_COLUMNS}
            row.update(copy.deepcopy(product))
            row["category_name"] = self._name_of(
                self.categories, product.get("idcategorie")
            )
            row["supplier_name"] = self._name_of(
                self.suppliers, product.get("idsupplier")
            )
            rows.append(row)
        return rows

    def list_suppliers(self) -> list[dict]:
        return [dict(row) for row in self.suppliers.values()]

    def list_categories(self) -> list[dict]:
        return [dict(row) for row in self.categories.values()]

    def _check_columns(self, fields: dict) -> None:
        unknown = sorted(set(fields) - set(PRODUCT_COLUMNS))
        if unknown:
            raise DelegateError(
                f"Could not find the '{unknown[0]}' column of '{PRODUCTS_TABLE}'",
                code="PGRST204",
            )

    def insert_product(self, row: dict) -> None:
        self._check_columns(row)
        key = _key(row["id"])
        if key in self.products:
            raise DelegateError(
                'duplicate key value violates unique constraint "products_pkey"',
                code="23505",
            )
        self.products[key] = dict(row)

    def update_product(self, product_id: str, fields: dict) -> None:
        self._check_columns(fields)
        product = self.products.get(_key(product_id))
        if not product:
            return
        product.update(fields)
        if "id" in fields and _key(fields["id"]) != _key(product_id):
            del self.products[_key(product_id)]
            self.products[_key(fields["id"])] = product

    def delete_product(self, product_id: str) -> None:
        self.products.pop(_key(product_id), None)


class SupabaseDbClient:
    """
    Catalog access through the Supabase (PostgREST) client.
    """

    def __init__(self, client: Client):
        self._client = client

    def _execute(self, query) -> list[dict]:
        try:
            response = query.execute()
        except APIError as exc:
            raise DelegateError(exc.message or str(exc), code=exc.code) from exc
        return response.data or []

    @staticmethod
    def _flatten_product(row: dict) -> dict:
        flat = dict(row)
        category = flat.pop(CATEGORIES_TABLE, None) or {}
        supplier = flat.pop(SUPPLIERS_TABLE, None) or {}
        flat["category_name"] = category.get("name")
        flat["supplier_name"] = supplier.get("name")
        return flat

    def list_products(self) -> list[dict]:
        rows = self._execute(
            self._client.table(PRODUCTS_TABLE).select(PRODUCTS_JOINED_SELECT)
        )
        return [self._flatten_product(row) for row in rows]

    def list_suppliers(self) -> list[dict]:
        return self._execute(self._client.table(SUPPLIERS_TABLE).select("*"))

    def list_categories(self) -> list[dict]:
        return self._execute(self._client.table(CATEGORIES_TABLE).select("*"))

    def insert_product(self, row: dict) -> None:
        self._execute(self._client.table(PRODUCTS_TABLE).insert([row]))

    def update_product(self, product_id: str, fields: dict) -> None:
        self._execute(
            self._client.table(PRODUCTS_TABLE).update(fields).eq("id", product_id)
        )

    def delete_product(self, product_id: str) -> None:
        self._execute(
            self._client.table(PRODUCTS_TABLE).delete().eq("id", product_id)
        )


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _coerce_id(value: Any) -> Any:
        # Path parameters arrive as text; the key columns are integers.
        if isinstance(value, str) and value.lstrip("-").isdigit():
            return int(value)
        return value

    def _run(self, fn):
        try:
            with self.Session() as session:
                return fn(session)
        except SQLAlchemyError as exc:
            orig = getattr(exc, "orig", None)
            raise DelegateError(str(orig or exc)) from exc

    def list_products(self) -> list[dict]:
        category = aliased(CategoryRow)
        supplier = aliased(SupplierRow)
        stmt = (
            select(
                ProductRow,
                category.name.label("category_name"),
                supplier.name.label("supplier_name"),
            )
            .outerjoin(category, ProductRow.idcategorie == category.id)
            .outerjoin(supplier, ProductRow.idsupplier == supplier.id)
            .order_by(ProductRow.id)
        )

        def _list(session: Session) -> list[dict]:
            results = []
            for product, category_name, supplier_name in session.execute(stmt):
                row = {column: getattr(product, column) for column in PRODUCT_COLUMNS}
                row["category_name"] = category_name
                row["supplier_name"] = supplier_name
                results.append(row)
            return results

        return self._run(_list)

    def _list_named(self, row_type) -> list[dict]:
        def _list(session: Session) -> list[dict]:
            rows = session.execute(select(row_type).order_by(row_type.id)).scalars()
            return [{"id": row.id, "name": row.name} for row in rows]

        return self._run(_list)

    def list_suppliers(self) -> list[dict]:
        return self._list_named(SupplierRow)

    def list_categories(self) -> list[dict]:
        return self._list_named(CategoryRow)

    def insert_product(self, row: dict) -> None:
        def _insert(session: Session) -> None:
            session.execute(insert(ProductRow).values(**row))
            session.commit()

        self._run(_insert)

    def update_product(self, product_id: str, fields: dict) -> None:
        def _update(session: Session) -> None:
            session.execute(
                update(ProductRow)
                .where(ProductRow.id == self._coerce_id(product_id))
                .values(**fields)
            )
            session.commit()

        self._run(_update)

    def delete_product(self, product_id: str) -> None:
        def _delete(session: Session) -> None:
            session.execute(
                delete(ProductRow).where(ProductRow.id == self._coerce_id(product_id))
            )
            session.commit()

        self._run(_delete)


Base = declarative_base()


class SupplierRow(Base):
    __tablename__ = SUPPLIERS_TABLE

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)


class CategoryRow(Base):
    __tablename__ = CATEGORIES_TABLE

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)


class ProductRow(Base):
    __tablename__ = PRODUCTS_TABLE

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    coastprice = Column(Float, nullable=True)
    # Dates are stored as ISO-8601 text, exactly as clients send them.
    lastpurchase = Column(String, nullable=True)
    lastupdate = Column(String, nullable=True)
    idsupplier = Column(Integer, ForeignKey(f"{SUPPLIERS_TABLE}.id"), nullable=True)
    idcategorie = Column(Integer, ForeignKey(f"{CATEGORIES_TABLE}.id"), nullable=True)
