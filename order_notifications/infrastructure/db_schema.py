from sqlalchemy import Table, Column, String, Integer, Boolean, DateTime, JSON, MetaData, Index
from sqlalchemy.sql import func

metadata = MetaData()


orders_tbl = Table(
    "orders",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, nullable=True, index=True),
    Column("status", String, nullable=False, default="pending"),
    Column("total", Integer, nullable=False, default=0),
    Column("shipping_address", JSON, nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
)


# Append-only. user_id NULL marks an admin notification; order_id is the
# canonical string copy of data["orderId"].
notifications_tbl = Table(
    "notifications",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, nullable=True, index=True),
    Column("type", String, nullable=False),
    Column("order_id", String, nullable=True),
    Column("data", JSON, nullable=False),
    Column("is_read", Boolean, nullable=False, default=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Index("ix_notifications_type_order_id", "type", "order_id"),
)


# Single row edited from the admin settings page. NULL means enabled.
store_settings_tbl = Table(
    "store_settings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("enable_email_notifications", Boolean, nullable=True, default=True),
    Column("enable_whatsapp_notifications", Boolean, nullable=True, default=True),
)
